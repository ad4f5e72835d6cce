"""HTTP middleware: per-route response caching and global rate limiting."""

from .cache_middleware import (
    CACHE_HEADER,
    CacheMiddleware,
    CachedRoute,
    cached_route,
    request_cache_key,
)
from .rate_limit import RateLimitMiddleware, client_identifier

__all__ = [
    "CACHE_HEADER",
    "CacheMiddleware",
    "CachedRoute",
    "cached_route",
    "request_cache_key",
    "RateLimitMiddleware",
    "client_identifier",
]
