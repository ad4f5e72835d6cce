"""Scrobble Cache - caching proxy for music metadata APIs.

This package provides a layered architecture:

Layers:
    - entities: Domain models (CacheKey, CachedEntry, CacheCategory, RateWindow)
    - key_codec / ttl_policy: Pure key derivation and TTL lookup
    - protocols: Interface contracts (CacheBackend, UpstreamClient)
    - repositories: Cache backends (memory, Redis)
    - services: CacheStore and RateLimiter
    - middleware: Per-route cache interception and rate limiting
    - handlers: Upstream API handlers
    - dto: Data transfer objects (API contracts)

Usage:
    ```python
    from scrobble_cache import CacheStore, MemoryCacheBackend, build_key

    store = CacheStore(backend=MemoryCacheBackend())
    key = build_key("https://example.com", "/api/lastfm/track-info", {"track": "x"})
    ```

For HTTP API:
    ```python
    from scrobble_cache.api.app import create_app
    ```
"""

from scrobble_cache.config import Settings, get_settings, settings
from scrobble_cache.entities import CacheCategory, CachedEntry, CacheKey, RateLimitResult
from scrobble_cache.key_codec import build_key, key_for_url
from scrobble_cache.middleware import CacheMiddleware, RateLimitMiddleware, cached_route
from scrobble_cache.protocols import CacheBackend, UpstreamClient
from scrobble_cache.repositories import MemoryCacheBackend, RedisCacheBackend
from scrobble_cache.services import CacheStore, RateLimiter
from scrobble_cache.ttl_policy import TTL_TABLE, cache_control_for, ttl_for

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    "settings",
    # Entities
    "CacheCategory",
    "CacheKey",
    "CachedEntry",
    "RateLimitResult",
    # Key derivation and TTL policy
    "build_key",
    "key_for_url",
    "TTL_TABLE",
    "ttl_for",
    "cache_control_for",
    # Protocols (interfaces)
    "CacheBackend",
    "UpstreamClient",
    # Backends
    "MemoryCacheBackend",
    "RedisCacheBackend",
    # Services
    "CacheStore",
    "RateLimiter",
    # Middleware
    "CacheMiddleware",
    "RateLimitMiddleware",
    "cached_route",
]
