"""httpx-based upstream client.

Every request carries the ``LastFMViewer/<version>`` User-Agent; MusicBrainz
rejects anonymous clients.
"""

import httpx

from scrobble_cache.config import Settings, settings


class HttpxUpstreamClient:
    """httpx implementation of the UpstreamClient protocol.

    This class satisfies the UpstreamClient protocol through structural
    typing - no explicit inheritance needed.
    """

    def __init__(
        self,
        user_agent: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the upstream client.

        Args:
            user_agent: User-Agent header. Defaults to settings.user_agent.
            timeout: Request timeout in seconds. Defaults to settings.
        """
        self._user_agent = user_agent if user_agent is not None else settings.user_agent
        self._timeout = timeout if timeout is not None else settings.upstream_timeout
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def create(cls, config: Settings | None = None) -> "HttpxUpstreamClient":
        """Factory method to create HttpxUpstreamClient from settings."""
        config = config or settings
        return cls(user_agent=config.user_agent, timeout=config.upstream_timeout)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                headers={"User-Agent": self._user_agent},
                follow_redirects=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    async def fetch(self, url: str, params: dict[str, str] | None = None) -> httpx.Response:
        """Issue a GET request.

        Raises:
            httpx.HTTPError: On transport failures (status codes are not raised)
        """
        return await self.client.get(url, params=params)

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
