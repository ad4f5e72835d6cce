"""Handler layer for HTTP endpoints.

Architecture:
    Route -> CacheMiddleware -> Handler -> UpstreamClient
"""

from .music_handler import MusicHandler

__all__ = [
    "MusicHandler",
]
