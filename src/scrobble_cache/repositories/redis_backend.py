"""Redis implementation of CacheBackend.

Entries are stored as JSON under ``<prefix>:<url>`` with ``EX`` set to the
entry's max-age, so Redis enforces expiry on its own.
"""

import base64
import json

import redis.asyncio as redis

from scrobble_cache.config import Settings, get_redis_client, settings
from scrobble_cache.entities import CachedEntry, CacheKey


class RedisCacheBackend:
    """Redis-backed cache backend using the asyncio client.

    This class satisfies the CacheBackend protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        prefix: str | None = None,
    ) -> None:
        """Initialize the Redis cache backend.

        Args:
            redis_client: Redis client instance. If None, creates default.
            prefix: Key prefix for all entries. Defaults to settings.
        """
        self._client = redis_client if redis_client is not None else get_redis_client()
        self._prefix = prefix if prefix is not None else settings.cache_key_prefix

    @classmethod
    def create(cls, config: Settings | None = None) -> "RedisCacheBackend":
        """Factory method to create RedisCacheBackend from settings.

        Args:
            config: Settings providing the Redis URL and key prefix. If None, uses global settings.

        Returns:
            Configured RedisCacheBackend
        """
        config = config or settings
        return cls(redis_client=get_redis_client(config), prefix=config.cache_key_prefix)

    def _name(self, key: CacheKey) -> str:
        return f"{self._prefix}:{key}"

    @staticmethod
    def _serialize(entry: CachedEntry) -> str:
        return json.dumps(
            {
                "status": entry.status,
                "headers": entry.headers,
                "body": base64.b64encode(entry.body).decode("ascii"),
                "stored_at": entry.stored_at,
                "max_age": entry.max_age,
            }
        )

    @staticmethod
    def _deserialize(raw: bytes | str) -> CachedEntry:
        data = json.loads(raw)
        return CachedEntry(
            status=int(data["status"]),
            headers=dict(data["headers"]),
            body=base64.b64decode(data["body"]),
            stored_at=float(data["stored_at"]),
            max_age=int(data["max_age"]),
        )

    async def match(self, key: CacheKey) -> CachedEntry | None:
        """Fetch an entry; expired keys are already gone from Redis.

        Raises:
            redis.RedisError: If Redis is unreachable
            ValueError: If the stored payload cannot be decoded
        """
        raw = await self._client.get(self._name(key))
        if raw is None:
            return None
        return self._deserialize(raw)

    async def put(self, key: CacheKey, entry: CachedEntry) -> None:
        """Store an entry with Redis-side expiry.

        Raises:
            ValueError: If the entry carries no positive max-age
        """
        if entry.max_age <= 0:
            raise ValueError("Entry must be stamped with a positive max-age before storing")
        await self._client.set(self._name(key), self._serialize(entry), ex=entry.max_age)

    async def delete(self, key: CacheKey) -> bool:
        result: int = await self._client.delete(self._name(key))
        return result > 0

    async def count(self) -> int:
        count = 0
        async for _ in self._client.scan_iter(match=f"{self._prefix}:*"):
            count += 1
        return count

    async def health_check(self) -> bool:
        """Check if Redis is accessible.

        Returns:
            True if healthy, False otherwise
        """
        try:
            result = await self._client.ping()
            return bool(result)
        except redis.RedisError:
            return False

    async def close(self) -> None:
        await self._client.aclose()

    @property
    def client(self) -> redis.Redis:
        """Get the Redis client."""
        return self._client
