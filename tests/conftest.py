"""Shared fixtures for the scrobble cache tests."""

from typing import Any

import httpx
import pytest

from scrobble_cache.config import Settings
from scrobble_cache.entities import CachedEntry, CacheKey
from scrobble_cache.repositories import MemoryCacheBackend
from scrobble_cache.services import CacheStore


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingBackend(MemoryCacheBackend):
    """Memory backend that records every put."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.puts: list[tuple[CacheKey, CachedEntry]] = []

    async def put(self, key: CacheKey, entry: CachedEntry) -> None:
        self.puts.append((key, entry))
        await super().put(key, entry)


class FailingBackend:
    """Backend whose every operation raises."""

    async def match(self, key: CacheKey) -> CachedEntry | None:
        raise ConnectionError("backend down")

    async def put(self, key: CacheKey, entry: CachedEntry) -> None:
        raise ConnectionError("backend down")

    async def delete(self, key: CacheKey) -> bool:
        raise ConnectionError("backend down")

    async def count(self) -> int:
        raise ConnectionError("backend down")

    async def health_check(self) -> bool:
        return False

    async def close(self) -> None:
        return None


class FakeUpstream:
    """UpstreamClient returning canned JSON per URL."""

    def __init__(self, responses: dict[str, tuple[int, Any]] | None = None) -> None:
        self.responses = responses or {}
        self.calls: list[tuple[str, dict[str, str] | None]] = []
        self.closed = False

    async def fetch(self, url: str, params: dict[str, str] | None = None) -> httpx.Response:
        self.calls.append((url, params))
        if url not in self.responses:
            raise httpx.ConnectError("no route to upstream", request=httpx.Request("GET", url))
        status, payload = self.responses[url]
        return httpx.Response(status, json=payload, request=httpx.Request("GET", url, params=params))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock():
    """A fake clock shared by the store and its backend."""
    return FakeClock()


@pytest.fixture
def backend(clock):
    """A recording memory backend."""
    return RecordingBackend(max_entries=100, clock=clock)


@pytest.fixture
def store(backend, clock):
    """A CacheStore over the recording backend."""
    return CacheStore(backend=backend, clock=clock)


@pytest.fixture
def test_settings():
    """Settings isolated from the environment."""
    return Settings(
        cache_backend="memory",
        lastfm_api_key="test-key",
        lastfm_api_root="https://lastfm.test/2.0/",
        musicbrainz_api_root="https://musicbrainz.test/ws/2",
        cover_art_api_root="https://coverart.test",
        rate_limit_max_requests=100,
        rate_limit_window_ms=60_000,
    )
