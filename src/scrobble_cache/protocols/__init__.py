"""Protocol interfaces for swappable implementations.

Protocols enable:
- Swapping the cache backend (memory -> Redis) without touching the middleware
- Unit testing with fake upstream clients
"""

from .cache_backend import CacheBackend
from .upstream_client import UpstreamClient

__all__ = [
    "CacheBackend",
    "UpstreamClient",
]
