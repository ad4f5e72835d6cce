"""Cache category domain entity."""

from enum import Enum


class CacheCategory(Enum):
    """Content category selecting a TTL bucket.

    Each proxied route is bound to exactly one category.
    """

    USER_TRACKS = "user_tracks"
    TRACK_INFO = "track_info"
    MUSICBRAINZ = "musicbrainz"
    COVER_ART = "cover_art"
