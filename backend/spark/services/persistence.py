"""
Durable storage for the entries document.

The whole store is one JSON array. Writes go to a temp file in the target
directory and are renamed over the document, so a reader only ever sees the
previous or the next complete snapshot. An unreadable document is moved aside
and treated as empty.
"""

import asyncio
import json
import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from spark.logging import get_logger
from spark.models import SaveResult, SparkEntry

logger = get_logger('services.persistence')

CORRUPT_SUFFIX = ".corrupt"

# Epoch of numeric timestamps in documents written by the iOS app.
REFERENCE_DATE = datetime(2001, 1, 1, tzinfo=timezone.utc)


class CorruptStorageError(ValueError):
    """The entries document exists but cannot be decoded."""


def _format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_timestamp(raw: Any, field: str) -> datetime:
    # Numbers are seconds since the reference date, as the iOS app writes them.
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        try:
            return REFERENCE_DATE + timedelta(seconds=raw)
        except (OverflowError, ValueError) as exc:
            raise CorruptStorageError(f"{field}: timestamp out of range") from exc
    if isinstance(raw, str):
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError as exc:
            raise CorruptStorageError(f"{field}: invalid timestamp {raw!r}") from exc
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise CorruptStorageError(f"{field}: expected timestamp, got {type(raw).__name__}")


def _entry_to_record(entry: SparkEntry) -> dict:
    record: dict[str, Any] = {
        "id": entry.id,
        "title": entry.title,
        "content": entry.content,
        "creationDate": _format_timestamp(entry.creation_date),
        "earliestUnlock": _format_timestamp(entry.earliest_unlock),
    }
    if entry.geofence is not None:
        record["geofence"] = {
            "id": entry.geofence.id,
            "latitude": entry.geofence.latitude,
            "longitude": entry.geofence.longitude,
            "radius": entry.geofence.radius,
        }
    if entry.weather is not None:
        record["weather"] = entry.weather.value
    if entry.emotion is not None:
        record["emotion"] = entry.emotion.value
    if entry.unlocked_at is not None:
        record["unlockedAt"] = _format_timestamp(entry.unlocked_at)
    return record


def _record_to_entry(record: Any) -> SparkEntry:
    if not isinstance(record, dict):
        raise CorruptStorageError(f"entry: expected object, got {type(record).__name__}")
    missing = [k for k in ("id", "title", "content", "creationDate") if k not in record]
    if missing:
        raise CorruptStorageError(f"entry missing fields: {', '.join(missing)}")

    created = _parse_timestamp(record["creationDate"], "creationDate")
    earliest = record.get("earliestUnlock")
    unlocked = record.get("unlockedAt")
    try:
        return SparkEntry(
            id=record["id"],
            title=record["title"],
            content=record["content"],
            creation_date=created,
            geofence=record.get("geofence"),
            weather=record.get("weather"),
            emotion=record.get("emotion"),
            # Documents written before earliest-unlock existed carry none.
            earliest_unlock=_parse_timestamp(earliest, "earliestUnlock") if earliest is not None else created,
            unlocked_at=_parse_timestamp(unlocked, "unlockedAt") if unlocked is not None else None,
        )
    except ValidationError as exc:
        raise CorruptStorageError(f"entry {record.get('id')!r}: {exc.error_count()} invalid field(s)") from exc


def encode_entries(entries: Iterable[SparkEntry]) -> bytes:
    """Serialize entries deterministically; equal inputs give equal bytes."""
    records = [_entry_to_record(e) for e in entries]
    return (json.dumps(records, indent=2, ensure_ascii=False) + "\n").encode("utf-8")


def decode_entries(data: bytes) -> list[SparkEntry]:
    """
    Parse an entries document.

    :param data: Raw document bytes
    :type data: bytes
    :return: Entries in document order
    :rtype: list[SparkEntry]
    :raises CorruptStorageError: If the bytes are not a valid entries document
    """
    try:
        payload = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as exc:
        raise CorruptStorageError(f"not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise CorruptStorageError(f"expected a JSON array, got {type(payload).__name__}")

    entries = [_record_to_entry(r) for r in payload]
    seen: set[str] = set()
    for entry in entries:
        if entry.id in seen:
            raise CorruptStorageError(f"duplicate entry id {entry.id!r}")
        seen.add(entry.id)
    return entries


def write_bytes_atomic(path: Path, payload: bytes) -> None:
    """Replace ``path`` with ``payload`` without exposing a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except Exception:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


class EntryPersistence:
    """Loads and saves the entries document."""

    def __init__(self, path: str):
        self.path = Path(path)

    def _read(self) -> Optional[bytes]:
        try:
            return self.path.read_bytes()
        except FileNotFoundError:
            return None

    def _quarantine(self) -> None:
        target = self.path.with_name(self.path.name + CORRUPT_SUFFIX)
        try:
            os.replace(self.path, target)
            logger.warning(f"Moved unreadable entries document to {target}")
        except OSError as e:
            logger.error(f"Could not move unreadable entries document aside: {e}")

    async def load(self) -> list[SparkEntry]:
        """
        Load all entries.

        A missing document yields an empty list. So does a corrupt one, after
        it has been moved aside; the caller starts fresh either way.

        :return: Stored entries in document order
        :rtype: list[SparkEntry]
        """
        try:
            data = await asyncio.to_thread(self._read)
        except OSError as e:
            logger.error(f"Failed to read {self.path}: {e}; starting fresh")
            return []

        if data is None:
            logger.info(f"No saved entries at {self.path}, starting fresh")
            return []

        try:
            entries = decode_entries(data)
        except CorruptStorageError as e:
            logger.warning(f"Failed to decode entries ({e}), starting fresh")
            await asyncio.to_thread(self._quarantine)
            return []

        logger.info(f"Loaded {len(entries)} entries from {self.path}")
        return entries

    async def save(self, entries: Iterable[SparkEntry]) -> SaveResult:
        """
        Write a full snapshot of ``entries``.

        The snapshot is serialized before this coroutine first yields, so later
        changes to the caller's list cannot leak into the write.

        :param entries: Entries to persist, in store order
        :type entries: Iterable[SparkEntry]
        :return: Outcome of the write; failures are reported, not raised
        :rtype: SaveResult
        """
        snapshot = list(entries)
        payload = encode_entries(snapshot)
        try:
            await asyncio.to_thread(write_bytes_atomic, self.path, payload)
        except OSError as e:
            logger.error(f"Failed to save {len(snapshot)} entries to {self.path}: {e}")
            return SaveResult(
                success=False,
                entry_count=len(snapshot),
                path=str(self.path),
                error=str(e),
            )

        logger.debug(f"Saved {len(snapshot)} entries to {self.path}")
        return SaveResult(success=True, entry_count=len(snapshot), path=str(self.path))
