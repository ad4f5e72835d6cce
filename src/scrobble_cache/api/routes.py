"""Proxy routes for the music APIs.

Each route is registered with ``route_class_override`` so it runs behind
the cache middleware with its own TTL category.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Path, Query

from scrobble_cache.api.dependencies import HandlerDep
from scrobble_cache.dto import ErrorResponse
from scrobble_cache.entities import CacheCategory
from scrobble_cache.middleware import cached_route


async def get_user_tracks(
    handler: HandlerDep,
    username: Annotated[str, Path(description="LastFM username")],
    limit: Annotated[str | None, Query(description="Number of tracks to return (default: 5)")] = None,
) -> Any:
    """Recent tracks of a Last.fm user."""
    return await handler.get_user_tracks(username, limit)


async def get_track_info(
    handler: HandlerDep,
    track: Annotated[str, Query(description="Track name")],
    artist: Annotated[str, Query(description="Artist name")],
) -> Any:
    """Last.fm track metadata."""
    return await handler.get_track_info(track, artist)


async def get_mb_releases(
    handler: HandlerDep,
    track: Annotated[str, Query(description="Track name")],
    artist: Annotated[str, Query(description="Artist name")],
    album: Annotated[str | None, Query(description="Album name (optional)")] = None,
) -> Any:
    """MusicBrainz releases for a recording."""
    return await handler.get_mb_releases(track, artist, album)


async def get_mb_release(
    handler: HandlerDep,
    mbid: Annotated[str, Path(description="MusicBrainz release ID")],
) -> Any:
    """MusicBrainz release details."""
    return await handler.get_mb_release(mbid)


async def get_cover_art(
    handler: HandlerDep,
    mbid: Annotated[str, Path(description="MusicBrainz release ID")],
) -> Any:
    """Cover Art Archive images for a release."""
    return await handler.get_cover_art(mbid)


ROUTES = [
    ("/user-tracks/{username}", get_user_tracks, CacheCategory.USER_TRACKS),
    ("/track-info", get_track_info, CacheCategory.TRACK_INFO),
    ("/mb-releases", get_mb_releases, CacheCategory.MUSICBRAINZ),
    ("/mb-release/{mbid}", get_mb_release, CacheCategory.MUSICBRAINZ),
    ("/cover-art/{mbid}", get_cover_art, CacheCategory.COVER_ART),
]


def create_router() -> APIRouter:
    """Build the ``/api/lastfm`` router with one cache category per route."""
    router = APIRouter(prefix="/api/lastfm", tags=["lastfm"])
    for path, endpoint, category in ROUTES:
        router.add_api_route(
            path,
            endpoint,
            methods=["GET"],
            responses={400: {"model": ErrorResponse}},
            route_class_override=cached_route(category),
        )
    return router
