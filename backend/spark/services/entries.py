"""Entry store: the authoritative in-memory collection of entries."""

import asyncio
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from spark.logging import get_logger
from spark.models import (
    ChangeKind,
    ClearResult,
    EntryQuery,
    EntryWriteResult,
    LockFilter,
    ReevaluationResult,
    SaveResult,
    SortOrder,
    SparkEntry,
    UnlockContext,
    UnlockDecision,
)
from spark.services.conditions import evaluate
from spark.services.events import ChangeNotifier
from spark.services.persistence import EntryPersistence

logger = get_logger('services.entries')

# Locked entries sort as if unlocked infinitely long ago.
_DISTANT_PAST = datetime.min.replace(tzinfo=timezone.utc)


class DuplicateEntryError(ValueError):
    """An entry with the same id is already in the store."""


def _matches(entry: SparkEntry, filters: EntryQuery) -> bool:
    if filters.search:
        needle = filters.search.casefold()
        if needle not in entry.title.casefold() and needle not in entry.content.casefold():
            return False
    if filters.lock_state == LockFilter.LOCKED and not entry.is_locked:
        return False
    if filters.lock_state == LockFilter.UNLOCKED and entry.is_locked:
        return False
    if filters.emotion is not None and entry.emotion != filters.emotion:
        return False
    if filters.weather is not None and entry.weather != filters.weather:
        return False
    return True


def _sorted(entries: list[SparkEntry], order: SortOrder) -> list[SparkEntry]:
    # sorted() is stable, also with reverse=True, so ties keep insertion order.
    if order == SortOrder.OLDEST:
        return sorted(entries, key=lambda e: e.creation_date)
    if order == SortOrder.RECENTLY_UNLOCKED:
        return sorted(entries, key=lambda e: e.unlocked_at or _DISTANT_PAST, reverse=True)
    return sorted(entries, key=lambda e: e.creation_date, reverse=True)


class EntryStore:
    """
    Ordered entries for the running process.

    Every mutation runs under one lock and flushes a full snapshot before the
    lock is released, so concurrent re-evaluations cannot stamp the same entry
    twice or interleave a save with a batch update. Reads never await and
    always see a consistent list.
    """

    def __init__(self, persistence: EntryPersistence, notifier: Optional[ChangeNotifier] = None):
        self.persistence = persistence
        self.notifier = notifier or ChangeNotifier()
        self._entries: list[SparkEntry] = []
        self._lock = asyncio.Lock()

    def _index_of(self, entry_id: str) -> Optional[int]:
        for i, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return i
        return None

    async def _announce(self, kind: ChangeKind, entry_ids: list[str], save: Optional[SaveResult]) -> None:
        await self.notifier.publish(kind, entry_ids)
        if save is not None and not save.success:
            await self.notifier.publish(ChangeKind.STORAGE_ERROR, entry_ids, detail=save.error)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._entries)

    def list_entries(self) -> list[SparkEntry]:
        return list(self._entries)

    def get(self, entry_id: str) -> Optional[SparkEntry]:
        i = self._index_of(entry_id)
        return self._entries[i] if i is not None else None

    def query(
        self,
        filters: Optional[EntryQuery] = None,
        predicate: Optional[Callable[[SparkEntry], bool]] = None,
    ) -> list[SparkEntry]:
        """
        Filter and sort entries.

        :param filters: Text, lock-state, emotion and weather filters plus ordering
        :type filters: EntryQuery | None
        :param predicate: Extra arbitrary filter applied after ``filters``
        :type predicate: Callable[[SparkEntry], bool] | None
        :return: Matching entries in the requested order
        :rtype: list[SparkEntry]
        """
        filters = filters or EntryQuery()
        matched = [e for e in self._entries if _matches(e, filters)]
        if predicate is not None:
            matched = [e for e in matched if predicate(e)]
        return _sorted(matched, filters.sort)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def load(self) -> list[SparkEntry]:
        async with self._lock:
            self._entries = await self.persistence.load()
            ids = [e.id for e in self._entries]
        await self.notifier.publish(ChangeKind.LOADED, ids)
        return list(self._entries)

    async def add(self, entry: SparkEntry) -> EntryWriteResult:
        """
        Append an entry and flush.

        :raises DuplicateEntryError: If the id is already stored
        """
        async with self._lock:
            if not entry.id:
                entry = entry.model_copy(update={"id": str(uuid4())})
            if self._index_of(entry.id) is not None:
                raise DuplicateEntryError(f"Entry {entry.id} already exists")
            self._entries.append(entry)
            save = await self.persistence.save(self._entries)

        logger.info(f"Added entry: {entry.title} ({entry.id[:8]})")
        await self._announce(ChangeKind.ADDED, [entry.id], save)
        return EntryWriteResult(entry=entry, save=save)

    async def update(self, entry: SparkEntry) -> Optional[EntryWriteResult]:
        """
        Replace the stored entry that has the same id.

        Creation date and lock state are owned by the store: the stored
        ``creation_date`` and ``unlocked_at`` are kept whatever the caller
        passes. Returns None, without flushing, if the id is unknown.
        """
        async with self._lock:
            i = self._index_of(entry.id)
            if i is None:
                logger.info(f"Update skipped, entry {entry.id[:8]} not found")
                return None
            existing = self._entries[i]
            entry = entry.model_copy(update={
                "creation_date": existing.creation_date,
                "unlocked_at": existing.unlocked_at,
            })
            self._entries[i] = entry
            save = await self.persistence.save(self._entries)

        await self._announce(ChangeKind.UPDATED, [entry.id], save)
        return EntryWriteResult(entry=entry, save=save)

    async def reevaluate_all(self, context: UnlockContext) -> ReevaluationResult:
        """
        Re-score every locked entry and stamp the ones whose conditions now hold.

        The batch is persisted once, and only if something unlocked.

        :param context: Readings to evaluate against
        :type context: UnlockContext
        :return: Which entries unlocked and how the flush went
        :rtype: ReevaluationResult
        """
        async with self._lock:
            evaluated = 0
            unlocked_ids: list[str] = []
            for i, entry in enumerate(self._entries):
                if not entry.is_locked:
                    continue
                evaluated += 1
                if evaluate(entry, context) != UnlockDecision.SHOULD_UNLOCK_NOW:
                    continue
                stamp = max(context.now, entry.creation_date)
                self._entries[i] = entry.model_copy(update={"unlocked_at": stamp})
                unlocked_ids.append(entry.id)

            save = await self.persistence.save(self._entries) if unlocked_ids else None

        if unlocked_ids:
            logger.info(f"Unlocked {len(unlocked_ids)} of {evaluated} locked entries")
            await self._announce(ChangeKind.UNLOCKED, unlocked_ids, save)
        return ReevaluationResult(evaluated=evaluated, unlocked_ids=unlocked_ids, save=save)

    async def clear_all(self) -> ClearResult:
        async with self._lock:
            cleared = len(self._entries)
            self._entries = []
            save = await self.persistence.save(self._entries)

        logger.info(f"Cleared {cleared} entries")
        await self._announce(ChangeKind.CLEARED, [], save)
        return ClearResult(cleared_count=cleared, save=save)

    async def replace_all(self, entries: Iterable[SparkEntry]) -> SaveResult:
        """Swap the whole collection, e.g. for demo seeding."""
        entries = list(entries)
        ids = [e.id for e in entries]
        if len(set(ids)) != len(ids):
            raise DuplicateEntryError("Replacement entries contain duplicate ids")

        async with self._lock:
            self._entries = entries
            save = await self.persistence.save(self._entries)

        await self._announce(ChangeKind.LOADED, ids, save)
        return save
