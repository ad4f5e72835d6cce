"""TTL policy per cache category.

TTLs are inversely proportional to how often the upstream data changes:
recent scrobbles change every few seconds, cover art practically never.
"""

from collections.abc import Mapping
from types import MappingProxyType

from scrobble_cache.entities import CacheCategory

TTL_TABLE: Mapping[CacheCategory, int] = MappingProxyType(
    {
        CacheCategory.USER_TRACKS: 10,  # 10 seconds
        CacheCategory.TRACK_INFO: 86400,  # 1 day
        CacheCategory.MUSICBRAINZ: 86400 * 7,  # 7 days
        CacheCategory.COVER_ART: 86400 * 30,  # 30 days
    }
)


def ttl_for(category: CacheCategory) -> int:
    """Get the TTL in seconds for a category.

    Raises:
        KeyError: If the category has no TTL entry
    """
    return TTL_TABLE[category]


def cache_control_for(category: CacheCategory) -> str:
    """Get the ``Cache-Control`` value stamped on stored entries."""
    return f"public, max-age={ttl_for(category)}"
