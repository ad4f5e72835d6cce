"""Upstream HTTP client protocol.

The proxy endpoints only need ``fetch(url) -> response``; tests swap in a
fake, production uses HttpxUpstreamClient.
"""

from typing import Protocol, runtime_checkable

import httpx


@runtime_checkable
class UpstreamClient(Protocol):
    """Protocol for the outbound HTTP capability."""

    async def fetch(self, url: str, params: dict[str, str] | None = None) -> httpx.Response:
        """Issue a GET request against an upstream API.

        Args:
            url: Absolute URL
            params: Optional query parameters

        Returns:
            The upstream response (body already read)
        """
        ...

    async def close(self) -> None:
        """Close underlying connections."""
        ...
