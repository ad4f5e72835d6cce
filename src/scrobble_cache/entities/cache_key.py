"""Cache key domain entity."""

from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class CacheKey:
    """Canonical lookup key, shaped like a synthetic GET request.

    Its identity for storage purposes is the fully serialized URL, so
    ``str(key)`` is what backends index on.

    Attributes:
        url: Scheme, host, path and sorted query string
        method: Always ``"GET"``
    """

    url: str
    method: str = "GET"

    def __str__(self) -> str:
        return self.url

    def as_request(self) -> httpx.Request:
        """Return the key as a read-only synthetic httpx request."""
        return httpx.Request(self.method, self.url)
