"""Cache backend protocol.

Defines the interface for any key -> response store that CacheStore can
write through to.

Implementations can include:
- In-process dictionary with timestamp expiry (default)
- Redis with key TTLs
- Any other store offering match/put/delete
"""

from typing import Protocol, runtime_checkable

from scrobble_cache.entities import CachedEntry, CacheKey


@runtime_checkable
class CacheBackend(Protocol):
    """Protocol for cache storage backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed. Backends may raise; CacheStore is
    responsible for containing failures.

    Example:
        ```python
        from scrobble_cache.protocols import CacheBackend

        backend: CacheBackend = MemoryCacheBackend()
        backend: CacheBackend = RedisCacheBackend(client)
        ```
    """

    async def match(self, key: CacheKey) -> CachedEntry | None:
        """Look up a fresh entry.

        Args:
            key: The cache key

        Returns:
            The stored entry, or None if absent or expired
        """
        ...

    async def put(self, key: CacheKey, entry: CachedEntry) -> None:
        """Store an entry, replacing any existing one.

        Args:
            key: The cache key
            entry: Entry already stamped with its max-age
        """
        ...

    async def delete(self, key: CacheKey) -> bool:
        """Remove an entry.

        Args:
            key: The cache key

        Returns:
            True if an entry existed, False otherwise
        """
        ...

    async def count(self) -> int:
        """Count stored entries.

        Returns:
            Number of entries currently held (may include not yet expired ones)
        """
        ...

    async def health_check(self) -> bool:
        """Check if the backend is reachable.

        Returns:
            True if healthy, False otherwise
        """
        ...

    async def close(self) -> None:
        """Release any connections held by the backend."""
        ...
