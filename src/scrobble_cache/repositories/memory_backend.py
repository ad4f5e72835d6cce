"""In-process implementation of CacheBackend.

Entries live in a dictionary for the lifetime of the process. Expiry is an
explicit timestamp check on read; when the store is full the entry with the
oldest write time is evicted.
"""

import time
from collections.abc import Callable

from scrobble_cache.config import Settings, settings
from scrobble_cache.entities import CachedEntry, CacheKey


class MemoryCacheBackend:
    """Dictionary-backed cache backend.

    This class satisfies the CacheBackend protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        max_entries: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the memory backend.

        Args:
            max_entries: Size cap before eviction. Defaults to settings.
            clock: Source of Unix timestamps (injectable for tests).
        """
        self._max_entries = max_entries if max_entries is not None else settings.cache_max_entries
        self._clock = clock
        self._entries: dict[str, CachedEntry] = {}

    @classmethod
    def create(cls, config: Settings | None = None) -> "MemoryCacheBackend":
        """Factory method to create MemoryCacheBackend from settings."""
        config = config or settings
        return cls(max_entries=config.cache_max_entries)

    async def match(self, key: CacheKey) -> CachedEntry | None:
        entry = self._entries.get(str(key))
        if entry is None:
            return None
        if not entry.is_fresh(self._clock()):
            self._entries.pop(str(key), None)
            return None
        return entry

    async def put(self, key: CacheKey, entry: CachedEntry) -> None:
        name = str(key)
        if name not in self._entries and len(self._entries) >= self._max_entries:
            self._evict_oldest()
        self._entries[name] = entry

    async def delete(self, key: CacheKey) -> bool:
        return self._entries.pop(str(key), None) is not None

    async def count(self) -> int:
        return len(self._entries)

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        self._entries.clear()

    def _evict_oldest(self) -> None:
        """Drop the entry with the oldest write time."""
        if not self._entries:
            return
        oldest = min(self._entries, key=lambda name: self._entries[name].stored_at)
        del self._entries[oldest]

    @property
    def max_entries(self) -> int:
        """Get the size cap."""
        return self._max_entries
