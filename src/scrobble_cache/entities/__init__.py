"""Domain entities for internal representation.

These are pure dataclasses used by the services, backends and middleware.
They are NOT used for API contracts - use DTOs from the dto package for that.
"""

from .cache_category import CacheCategory
from .cache_key import CacheKey
from .cached_entry import CachedEntry
from .rate_window import RateLimitResult, RateWindow

__all__ = ["CacheCategory", "CacheKey", "CachedEntry", "RateLimitResult", "RateWindow"]
