"""Bounded local mirror of memory entries.

The cache is never the source of truth: entries enter it after a
successful remote write or read and leave it on delete, LRU eviction, or
expiry. Reads are O(1) by entry id.

Each entry expires at the earlier of `created_at + retention` and its
own `metadata.expires_at`.
"""

from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from cachetools import TLRUCache

from agentmem.memory.errors import MemoryValidationError
from agentmem.memory.models import MemoryEntry, utc_now
from agentmem.observability.metrics import CACHE_SIZE

NEVER = datetime.max.replace(tzinfo=timezone.utc)


class LocalMemoryCache:
    """LRU cache of entries keyed by id, bounded by size and age."""

    def __init__(
        self,
        max_entries: int = 1000,
        retention: timedelta | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.retention = retention
        self._clock = clock
        self._entries: TLRUCache = TLRUCache(
            maxsize=max_entries,
            ttu=self._time_to_use,
            timer=clock,
        )

    def _time_to_use(self, _key: str, entry: MemoryEntry, _now: datetime) -> datetime:
        return self.expires_at(entry)

    def expires_at(self, entry: MemoryEntry) -> datetime:
        """When an entry stops being served from the cache."""
        deadline = NEVER
        if self.retention is not None:
            try:
                deadline = entry.created_at + self.retention
            except OverflowError:
                pass
        if entry.metadata.expires_at is not None:
            deadline = min(deadline, entry.metadata.expires_at)
        return deadline

    def is_expired(self, entry: MemoryEntry, now: datetime | None = None) -> bool:
        return self.expires_at(entry) <= (now or self._clock())

    def put(self, entry: MemoryEntry) -> None:
        """Insert or replace an entry, evicting the least recently used overflow."""
        if not entry.id:
            raise MemoryValidationError("Cannot cache an entry without an id")
        if self.is_expired(entry):
            # TLRUCache skips expired inserts; drop any older copy instead
            self.evict(entry.id)
            return
        self._entries[entry.id] = entry
        CACHE_SIZE.set(len(self._entries))

    def get(self, entry_id: str) -> MemoryEntry | None:
        return self._entries.get(entry_id)

    def evict(self, entry_id: str) -> bool:
        removed = self._entries.pop(entry_id, None) is not None
        CACHE_SIZE.set(len(self._entries))
        return removed

    def prune_expired(self) -> int:
        """Drop expired entries, returning how many were removed."""
        expired = self._entries.expire()
        CACHE_SIZE.set(len(self._entries))
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()
        CACHE_SIZE.set(0)

    def values(self) -> list[MemoryEntry]:
        self._entries.expire()
        return list(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, entry_id: object) -> bool:
        return entry_id in self._entries
