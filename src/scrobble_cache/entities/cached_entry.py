"""Cached entry domain entity."""

import time
from dataclasses import dataclass, field, replace


@dataclass(frozen=True)
class CachedEntry:
    """A stored response: status, headers and body.

    The body is held as bytes so it can be read any number of times;
    ``clone`` still returns an independent object so the store never
    shares an instance with the response path.

    Attributes:
        status: HTTP status code of the stored response
        headers: Response headers, including ``Cache-Control`` once stored
        body: Raw response body
        stored_at: Unix timestamp of the write
        max_age: TTL in seconds stamped at write time (0 until stored)
    """

    status: int
    headers: dict[str, str]
    body: bytes
    stored_at: float = field(default_factory=time.time)
    max_age: int = 0

    def clone(self) -> "CachedEntry":
        """Return an independent copy of this entry."""
        return replace(self, headers=dict(self.headers))

    def stamped(self, cache_control: str, max_age: int, stored_at: float | None = None) -> "CachedEntry":
        """Return a copy carrying the ``Cache-Control`` header and TTL."""
        headers = {k: v for k, v in self.headers.items() if k.lower() != "cache-control"}
        headers["cache-control"] = cache_control
        return replace(
            self,
            headers=headers,
            max_age=max_age,
            stored_at=time.time() if stored_at is None else stored_at,
        )

    def is_fresh(self, now: float | None = None) -> bool:
        """Check the entry against its max-age."""
        if self.max_age <= 0:
            return False
        now = time.time() if now is None else now
        return now - self.stored_at < self.max_age
