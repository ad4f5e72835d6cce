"""Repository layer for data access.

Backends are protocol-based (structural typing), not inheritance-based.
Any class implementing the CacheBackend methods satisfies the protocol.
"""

from scrobble_cache.protocols import CacheBackend

from .memory_backend import MemoryCacheBackend
from .redis_backend import RedisCacheBackend

__all__ = [
    "CacheBackend",
    "MemoryCacheBackend",
    "RedisCacheBackend",
]
