"""Service layer for the cache and the rate limiter.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Middleware -> Service -> Backend
    (HTTP)     -> (Policy) -> (Data Access)
"""

from .cache_store import CacheStore
from .rate_limiter import RateLimiter, now_ms

__all__ = [
    "CacheStore",
    "RateLimiter",
    "now_ms",
]
