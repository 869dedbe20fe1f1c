"""
Tests for the entries document: encoding, atomic writes, and recovery from
missing or corrupt files.
"""
import asyncio
import json
import os
from datetime import datetime, timedelta, timezone

import pytest

from spark.models import Emotion, Geofence, SparkEntry, Weather
from spark.services.persistence import (
    CORRUPT_SUFFIX,
    CorruptStorageError,
    EntryPersistence,
    decode_entries,
    encode_entries,
)

NOW = datetime(2026, 3, 14, 12, 0, tzinfo=timezone.utc)


def _sample_entries() -> list[SparkEntry]:
    return [
        SparkEntry(
            title="Central Park",
            content="Walking under the elms",
            creation_date=NOW - timedelta(days=5),
            geofence=Geofence(latitude=40.7851, longitude=-73.9683, radius=150),
        ),
        SparkEntry(
            title="Grateful",
            content="Today was amazing!",
            creation_date=NOW - timedelta(days=7),
            emotion=Emotion.GRATEFUL,
            weather=Weather.PARTLY_CLOUDY,
            unlocked_at=NOW - timedelta(hours=2),
        ),
        SparkEntry(
            title="Later",
            content="Not yet",
            creation_date=NOW,
            earliest_unlock=NOW + timedelta(days=30),
        ),
    ]


class TestLoad:
    async def test_missing_file_is_empty(self, persistence):
        assert await persistence.load() == []

    async def test_corrupt_file_is_empty_and_moved_aside(self, persistence, storage_path):
        storage_path.write_bytes(b"{\"not\": [valid json")
        assert await persistence.load() == []
        assert not storage_path.exists()
        quarantined = storage_path.with_name(storage_path.name + CORRUPT_SUFFIX)
        assert quarantined.read_bytes() == b"{\"not\": [valid json"

    async def test_save_after_corruption_succeeds(self, persistence, storage_path):
        storage_path.write_bytes(b"\x00\xff garbage")
        assert await persistence.load() == []

        result = await persistence.save(_sample_entries())
        assert result.success
        assert len(await EntryPersistence(str(storage_path)).load()) == 3

    @pytest.mark.parametrize("payload", [
        b"{}",
        b"[{\"id\": \"a\"}]",
        b"[{\"id\": \"a\", \"title\": \"t\", \"content\": \"c\", \"creationDate\": \"yesterday\"}]",
        b"[{\"id\": \"a\", \"title\": \"t\", \"content\": \"c\", \"creationDate\": \"2026-01-01T00:00:00Z\", \"weather\": \"hail\"}]",
        b"[{\"id\": \"a\", \"title\": \"t\", \"content\": \"c\", \"creationDate\": \"2026-01-01T00:00:00Z\", \"geofence\": {\"latitude\": 1, \"longitude\": 1, \"radius\": 0}}]",
    ])
    async def test_schema_mismatch_is_empty(self, persistence, storage_path, payload):
        storage_path.write_bytes(payload)
        assert await persistence.load() == []

    async def test_document_without_earliest_unlock(self, persistence, storage_path):
        storage_path.write_text(json.dumps([{
            "id": "3f1c7a0e-0000-4000-8000-000000000001",
            "title": "Old",
            "content": "From before unlock times",
            "creationDate": "2025-11-20T09:30:00Z",
            "weather": "rain",
        }]))
        [entry] = await persistence.load()
        assert entry.earliest_unlock == entry.creation_date
        assert entry.weather == Weather.RAIN
        assert entry.is_locked

    async def test_numeric_timestamps_use_reference_date(self, persistence, storage_path):
        # Shape and values of a document saved by the iOS app.
        storage_path.write_text(json.dumps([{
            "id": "e1",
            "title": "From the phone",
            "content": "c",
            "creationDate": 785000000.0,
            "unlockedAt": 785000600.5,
        }]))
        [entry] = await persistence.load()
        assert entry.creation_date == datetime(2025, 11, 16, 15, 33, 20, tzinfo=timezone.utc)
        assert entry.unlocked_at == entry.creation_date + timedelta(seconds=600.5)
        assert entry.earliest_unlock == entry.creation_date

    @pytest.mark.parametrize("raw", [1e300, float("inf")])
    async def test_out_of_range_numeric_timestamp_is_empty(self, persistence, storage_path, raw):
        storage_path.write_text(json.dumps([{
            "id": "e1", "title": "t", "content": "c", "creationDate": raw,
        }]))
        assert await persistence.load() == []

    async def test_deeply_nested_document_is_empty_and_moved_aside(self, persistence, storage_path):
        storage_path.write_bytes(b"[" * 200_000)
        assert await persistence.load() == []
        assert storage_path.with_name(storage_path.name + CORRUPT_SUFFIX).exists()

        assert (await persistence.save(_sample_entries())).success
        assert len(await persistence.load()) == 3


class TestSave:
    async def test_round_trip_preserves_entries(self, persistence):
        entries = _sample_entries()
        assert (await persistence.save(entries)).success
        assert await persistence.load() == entries

    async def test_save_load_is_byte_identical(self, persistence, storage_path):
        await persistence.save(_sample_entries())
        first = storage_path.read_bytes()

        await persistence.save(await persistence.load())
        second = storage_path.read_bytes()
        await persistence.save(await persistence.load())
        third = storage_path.read_bytes()

        assert first == second == third

    async def test_absent_optionals_are_omitted(self, persistence, storage_path):
        await persistence.save(_sample_entries())
        records = json.loads(storage_path.read_text())

        assert set(records[0]) == {"id", "title", "content", "creationDate", "earliestUnlock", "geofence"}
        assert set(records[0]["geofence"]) == {"id", "latitude", "longitude", "radius"}
        assert records[1]["weather"] == "partlyCloudy"
        assert records[1]["emotion"] == "grateful"
        assert records[1]["unlockedAt"] == "2026-03-14T10:00:00Z"
        assert "unlockedAt" not in records[2]

    async def test_empty_snapshot(self, persistence, storage_path):
        result = await persistence.save([])
        assert result.success
        assert result.entry_count == 0
        assert json.loads(storage_path.read_text()) == []

    async def test_write_failure_is_reported(self, persistence, storage_path):
        storage_path.mkdir()
        result = await persistence.save(_sample_entries())
        assert not result.success
        assert result.error
        assert result.entry_count == 3

    async def test_failed_replace_keeps_previous_document(self, persistence, storage_path, monkeypatch):
        await persistence.save(_sample_entries()[:1])
        before = storage_path.read_bytes()

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)
        result = await persistence.save(_sample_entries())

        assert not result.success
        assert result.error == "disk full"
        assert storage_path.read_bytes() == before
        assert [p.name for p in storage_path.parent.iterdir()] == [storage_path.name]

    async def test_no_temp_files_left_behind(self, persistence, storage_path):
        for _ in range(3):
            await persistence.save(_sample_entries())
        assert [p.name for p in storage_path.parent.iterdir()] == [storage_path.name]

    async def test_snapshot_taken_when_save_starts(self, persistence):
        entries = _sample_entries()
        task = asyncio.create_task(persistence.save(entries))
        await asyncio.sleep(0)
        entries.clear()
        result = await task
        assert result.entry_count == 3
        assert len(await persistence.load()) == 3


class TestCodec:
    def test_encode_is_deterministic(self):
        entries = _sample_entries()
        assert encode_entries(entries) == encode_entries(list(entries))

    def test_duplicate_ids_are_corrupt(self):
        entry = _sample_entries()[0]
        with pytest.raises(CorruptStorageError):
            decode_entries(encode_entries([entry, entry]))

    def test_non_utf8_is_corrupt(self):
        with pytest.raises(CorruptStorageError):
            decode_entries(b"\xff\xfe")
