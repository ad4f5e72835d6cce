"""HTTP handlers for the proxied music APIs.

Handlers call the upstream APIs through the UpstreamClient protocol and
return the JSON payload for the route. Failures are raised as
UpstreamError, which the app renders as ``{"error": ...}`` with status 400;
the cache middleware never stores them.
"""

from typing import Any

import httpx

from scrobble_cache.config import Settings, settings
from scrobble_cache.errors import UpstreamError
from scrobble_cache.logging import get_logger
from scrobble_cache.protocols import UpstreamClient

logger = get_logger(__name__)

DEFAULT_TRACK_LIMIT = 5


class MusicHandler:
    """HTTP handlers for Last.fm, MusicBrainz and Cover Art Archive.

    Example:
        ```python
        handler = MusicHandler(upstream=HttpxUpstreamClient.create())
        tracks = await handler.get_user_tracks("zoasr", limit=5)
        ```
    """

    def __init__(self, upstream: UpstreamClient, config: Settings | None = None) -> None:
        """Initialize the music handler.

        Args:
            upstream: Outbound HTTP client (required).
            config: Upstream roots and API key. Defaults to global settings.
        """
        self._upstream = upstream
        self._config = config or settings

    async def _get_json(self, url: str, params: dict[str, str] | None = None) -> tuple[httpx.Response, Any]:
        try:
            response = await self._upstream.fetch(url, params=params)
            return response, response.json()
        except httpx.HTTPError as e:
            logger.warning("Upstream request failed", url=url, error=str(e))
            raise UpstreamError(str(e)) from e
        except ValueError as e:
            logger.warning("Upstream returned invalid JSON", url=url, error=str(e))
            raise UpstreamError("Invalid response from upstream") from e

    def _lastfm_params(self, method: str, **params: str) -> dict[str, str]:
        return {
            "method": method,
            **params,
            "api_key": self._config.lastfm_api_key,
            "format": "json",
        }

    @staticmethod
    def _lastfm_error(data: Any) -> UpstreamError:
        if isinstance(data, dict) and "message" in data:
            return UpstreamError(str(data["message"]))
        return UpstreamError("Unknown error occurred")

    async def get_user_tracks(self, username: str, limit: str | None = None) -> Any:
        """Handle GET /api/lastfm/user-tracks/{username}.

        Args:
            username: Last.fm username
            limit: Number of tracks to return (default: 5)

        Returns:
            The ``user.getrecenttracks`` payload

        Raises:
            UpstreamError: If Last.fm reports an error
        """
        try:
            limit_num = int(limit) if limit else DEFAULT_TRACK_LIMIT
        except ValueError as e:
            raise UpstreamError(f"Invalid limit: {limit}") from e

        response, data = await self._get_json(
            self._config.lastfm_api_root,
            self._lastfm_params("user.getrecenttracks", user=username, limit=str(limit_num)),
        )
        if not response.is_success:
            raise self._lastfm_error(data)
        return data

    async def get_track_info(self, track: str, artist: str) -> Any:
        """Handle GET /api/lastfm/track-info.

        Tracks without an album image are rejected; the widget has nothing
        to render for them.

        Raises:
            UpstreamError: If Last.fm reports an error or the track has no album art
        """
        response, data = await self._get_json(
            self._config.lastfm_api_root,
            self._lastfm_params("track.getInfo", track=track, artist=artist),
        )
        if not response.is_success:
            raise self._lastfm_error(data)

        if not _has_album_image(data):
            raise UpstreamError("No lastfm album for this track")
        return data

    async def get_mb_releases(self, track: str, artist: str, album: str | None = None) -> Any:
        """Handle GET /api/lastfm/mb-releases.

        Searches official album recordings and returns the releases of the
        best match.

        Raises:
            UpstreamError: If nothing matches
        """
        clauses = [f'recording:"{track}"']
        if album:
            clauses.append(f"album:{album}")
        clauses += [f'artist:"{artist}"', "status:official", "primarytype:album"]

        try:
            _, data = await self._get_json(
                f"{self._config.musicbrainz_api_root}/recording/",
                {"query": " AND ".join(clauses), "inc": "releases", "fmt": "json", "limit": "1"},
            )
        except UpstreamError as e:
            raise UpstreamError("No releases found") from e

        recordings = data.get("recordings") if isinstance(data, dict) else None
        if not recordings:
            raise UpstreamError("No releases found")
        return recordings[0].get("releases")

    async def get_mb_release(self, mbid: str) -> Any:
        """Handle GET /api/lastfm/mb-release/{mbid}."""
        response, data = await self._get_json(
            f"{self._config.musicbrainz_api_root}/release/{mbid}",
            {"fmt": "json"},
        )
        if not response.is_success:
            message = data.get("error") if isinstance(data, dict) else None
            raise UpstreamError(str(message or f"Release {mbid} not found"))
        return data

    async def get_cover_art(self, mbid: str) -> Any:
        """Handle GET /api/lastfm/cover-art/{mbid}.

        Returns:
            The list of images for the release
        """
        response, data = await self._get_json(f"{self._config.cover_art_api_root}/release/{mbid}")
        if not response.is_success or not isinstance(data, dict) or "images" not in data:
            raise UpstreamError(f"No cover art found for {mbid}")
        return data["images"]


def _has_album_image(data: Any) -> bool:
    """Check that a track.getInfo payload carries a large album image."""
    try:
        return bool(data["track"]["album"]["image"][3]["#text"])
    except (KeyError, IndexError, TypeError):
        return False
