"""Best-effort cache store.

Wraps a CacheBackend so that no backend failure ever reaches the request
path: a failed read is a miss, a failed write or delete is logged and
reported as False.
"""

import time
from collections.abc import Callable

from scrobble_cache.config import Settings, settings
from scrobble_cache.entities import CacheCategory, CachedEntry, CacheKey
from scrobble_cache.logging import get_logger
from scrobble_cache.metrics import CacheMetrics
from scrobble_cache.protocols import CacheBackend
from scrobble_cache.repositories import MemoryCacheBackend, RedisCacheBackend
from scrobble_cache.ttl_policy import cache_control_for, ttl_for

logger = get_logger(__name__)


class CacheStore:
    """Read/write access to the response cache.

    This store depends on the CacheBackend PROTOCOL, not a concrete
    implementation, so the in-memory backend and Redis are interchangeable.

    Example:
        ```python
        store = CacheStore(backend=MemoryCacheBackend())

        await store.set(key, entry, CacheCategory.USER_TRACKS)
        cached = await store.get(key)
        ```
    """

    def __init__(
        self,
        backend: CacheBackend,
        metrics: CacheMetrics | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache store.

        Args:
            backend: Storage backend (required).
            metrics: Counters updated on writes and failures.
            clock: Source of Unix timestamps for the write time.
        """
        self._backend = backend
        self._metrics = metrics if metrics is not None else CacheMetrics()
        self._clock = clock

    @classmethod
    def create(
        cls,
        config: Settings | None = None,
        metrics: CacheMetrics | None = None,
    ) -> "CacheStore":
        """Factory method selecting the backend from settings.

        Args:
            config: Settings to read ``cache_backend`` from. Defaults to global settings.
            metrics: Optional shared metrics instance.

        Returns:
            Configured CacheStore
        """
        config = config or settings
        backend: CacheBackend
        if config.cache_backend == "redis":
            backend = RedisCacheBackend.create(config)
        else:
            backend = MemoryCacheBackend.create(config)
        return cls(backend=backend, metrics=metrics)

    async def get(self, key: CacheKey) -> CachedEntry | None:
        """Look up a cached entry.

        Returns:
            The entry, or None on a miss or a backend failure
        """
        try:
            return await self._backend.match(key)
        except Exception as e:
            self._metrics.record_error()
            logger.warning("Cache read failed", key=str(key), error=str(e))
            return None

    async def set(self, key: CacheKey, entry: CachedEntry, category: CacheCategory) -> bool:
        """Store a clone of ``entry`` stamped with the category's TTL.

        Args:
            key: The cache key
            entry: The response snapshot; it is cloned, never mutated
            category: Selects the TTL

        Returns:
            True if the backend accepted the write, False otherwise
        """
        stamped = entry.clone().stamped(
            cache_control=cache_control_for(category),
            max_age=ttl_for(category),
            stored_at=self._clock(),
        )
        try:
            await self._backend.put(key, stamped)
        except Exception as e:
            self._metrics.record_error()
            logger.warning(
                "Cache write failed",
                key=str(key),
                category=category.name,
                error=str(e),
            )
            return False

        self._metrics.record_store()
        return True

    async def delete(self, key: CacheKey) -> bool:
        """Remove an entry.

        Returns:
            True if an entry existed and was removed, False otherwise
        """
        try:
            return await self._backend.delete(key)
        except Exception as e:
            self._metrics.record_error()
            logger.warning("Cache delete failed", key=str(key), error=str(e))
            return False

    async def count(self) -> int:
        """Count stored entries, -1 if the backend cannot be reached."""
        try:
            return await self._backend.count()
        except Exception as e:
            logger.warning("Cache count failed", error=str(e))
            return -1

    async def is_healthy(self) -> bool:
        """Check if the backend is reachable."""
        return await self._backend.health_check()

    async def close(self) -> None:
        """Close the backend."""
        await self._backend.close()

    @property
    def backend(self) -> CacheBackend:
        """Get the underlying backend (for testing)."""
        return self._backend

    @property
    def metrics(self) -> CacheMetrics:
        """Get the metrics updated by this store."""
        return self._metrics
