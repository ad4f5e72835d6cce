"""
Tests for the scrobble cache API.
"""

import pytest
from fastapi.testclient import TestClient

from scrobble_cache.api.app import create_app
from scrobble_cache.services import CacheStore, RateLimiter
from tests.conftest import FailingBackend, FakeUpstream

LASTFM = "https://lastfm.test/2.0/"
TRACK_INFO = {
    "track": {
        "name": "Song",
        "album": {
            "image": [
                {"#text": "https://img/s.png"},
                {"#text": "https://img/m.png"},
                {"#text": "https://img/l.png"},
                {"#text": "https://img/xl.png"},
            ]
        },
    }
}


@pytest.fixture
def upstream():
    """Upstream with one canned response per endpoint."""
    return FakeUpstream(
        {
            "https://musicbrainz.test/ws/2/recording/": (
                200,
                {"recordings": [{"id": "rec-1", "releases": [{"id": "rel-1", "title": "Album"}]}]},
            ),
            "https://musicbrainz.test/ws/2/release/rel-1": (200, {"id": "rel-1", "title": "Album"}),
            "https://coverart.test/release/rel-1": (200, {"images": [{"image": "https://img/front.jpg"}]}),
        }
    )


@pytest.fixture
def limiter():
    return RateLimiter(max_requests=100, window_ms=60_000)


@pytest.fixture
def app(test_settings, store, limiter, upstream):
    return create_app(config=test_settings, cache_store=store, rate_limiter=limiter, upstream=upstream)


@pytest.fixture
def client(app):
    """Create a test client."""
    return TestClient(app)


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "Scrobble Cache API"
    assert data["endpoints"]["track_info"] == "/api/lastfm/track-info"


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "cache_healthy": True}
    assert response.headers["X-RateLimit-Limit"] == "100"
    assert response.headers["X-RateLimit-Remaining"] == "100"


def test_health_unhealthy_backend(test_settings, limiter, upstream):
    app = create_app(
        config=test_settings,
        cache_store=CacheStore(backend=FailingBackend()),
        rate_limiter=limiter,
        upstream=upstream,
    )
    response = TestClient(app).get("/health")
    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


def test_user_tracks_miss_then_hit(client, upstream):
    """The second identical request is served from cache."""
    upstream.responses[LASTFM] = (200, {"recenttracks": {"track": [{"name": "Song"}]}})

    first = client.get("/api/lastfm/user-tracks/zoasr?limit=3")
    assert first.status_code == 200
    assert first.headers["X-Cache"] == "MISS"
    assert first.json() == {"recenttracks": {"track": [{"name": "Song"}]}}

    second = client.get("/api/lastfm/user-tracks/zoasr?limit=3")
    assert second.status_code == 200
    assert second.headers["X-Cache"] == "HIT"
    assert second.headers["cache-control"] == "public, max-age=10"
    assert second.json() == first.json()

    assert len(upstream.calls) == 1
    url, params = upstream.calls[0]
    assert url == LASTFM
    assert params == {
        "method": "user.getrecenttracks",
        "user": "zoasr",
        "limit": "3",
        "api_key": "test-key",
        "format": "json",
    }


def test_user_tracks_expire(client, upstream, clock):
    upstream.responses[LASTFM] = (200, {"recenttracks": {"track": []}})

    client.get("/api/lastfm/user-tracks/zoasr")
    clock.advance(10)
    response = client.get("/api/lastfm/user-tracks/zoasr")

    assert response.headers["X-Cache"] == "MISS"
    assert len(upstream.calls) == 2
    assert upstream.calls[0][1]["limit"] == "5"


def test_track_info_param_order_shares_cache(client, upstream):
    upstream.responses[LASTFM] = (200, TRACK_INFO)

    first = client.get("/api/lastfm/track-info?track=Song&artist=Band")
    second = client.get("/api/lastfm/track-info?artist=Band&track=Song")

    assert first.headers["X-Cache"] == "MISS"
    assert second.headers["X-Cache"] == "HIT"
    assert second.headers["cache-control"] == "public, max-age=86400"
    assert len(upstream.calls) == 1


def test_track_info_without_album_is_not_cached(client, upstream, store):
    upstream.responses[LASTFM] = (200, {"track": {"name": "Song"}})

    response = client.get("/api/lastfm/track-info?track=Song&artist=Band")
    assert response.status_code == 400
    assert response.json() == {"error": "No lastfm album for this track"}
    assert "X-Cache" not in response.headers

    client.get("/api/lastfm/track-info?track=Song&artist=Band")
    assert len(upstream.calls) == 2
    assert store.metrics.stores == 0


def test_lastfm_error_message_is_forwarded(client, upstream):
    upstream.responses[LASTFM] = (404, {"error": 6, "message": "Track not found"})

    response = client.get("/api/lastfm/track-info?track=Nope&artist=Band")
    assert response.status_code == 400
    assert response.json() == {"error": "Track not found"}


def test_invalid_limit(client, upstream):
    response = client.get("/api/lastfm/user-tracks/zoasr?limit=lots")
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid limit: lots"}
    assert upstream.calls == []


def test_missing_query_param_is_validation_error(client, upstream):
    response = client.get("/api/lastfm/track-info?track=Song")
    assert response.status_code == 422
    assert upstream.calls == []


def test_mb_releases(client, upstream):
    response = client.get("/api/lastfm/mb-releases?track=Song&artist=Band&album=Album")
    assert response.status_code == 200
    assert response.json() == [{"id": "rel-1", "title": "Album"}]
    assert response.headers["X-Cache"] == "MISS"

    _, params = upstream.calls[0]
    assert params["query"] == (
        'recording:"Song" AND album:Album AND artist:"Band" AND status:official AND primarytype:album'
    )
    assert params["inc"] == "releases"


def test_mb_releases_not_found(client, upstream):
    upstream.responses["https://musicbrainz.test/ws/2/recording/"] = (200, {"recordings": []})

    response = client.get("/api/lastfm/mb-releases?track=Song&artist=Band")
    assert response.status_code == 400
    assert response.json() == {"error": "No releases found"}


def test_mb_release_cached_for_a_week(client):
    client.get("/api/lastfm/mb-release/rel-1")
    response = client.get("/api/lastfm/mb-release/rel-1")
    assert response.headers["X-Cache"] == "HIT"
    assert response.headers["cache-control"] == "public, max-age=604800"
    assert response.json() == {"id": "rel-1", "title": "Album"}


def test_cover_art(client, upstream):
    first = client.get("/api/lastfm/cover-art/rel-1")
    second = client.get("/api/lastfm/cover-art/rel-1")

    assert first.json() == [{"image": "https://img/front.jpg"}]
    assert second.headers["X-Cache"] == "HIT"
    assert second.headers["cache-control"] == "public, max-age=2592000"
    assert len(upstream.calls) == 1


def test_upstream_transport_error(client):
    response = client.get("/api/lastfm/cover-art/unknown")
    assert response.status_code == 400
    assert "error" in response.json()


def test_cache_failures_are_invisible(test_settings, limiter, upstream):
    """A broken backend still serves every request as a miss."""
    app = create_app(
        config=test_settings,
        cache_store=CacheStore(backend=FailingBackend()),
        rate_limiter=limiter,
        upstream=upstream,
    )
    client = TestClient(app)

    for _ in range(2):
        response = client.get("/api/lastfm/cover-art/rel-1")
        assert response.status_code == 200
        assert response.headers["X-Cache"] == "MISS"
    assert len(upstream.calls) == 2


def test_rate_limit_headers(client):
    response = client.get("/api/lastfm/cover-art/rel-1")
    assert response.headers["X-RateLimit-Limit"] == "100"
    assert response.headers["X-RateLimit-Remaining"] == "99"
    assert response.headers["X-RateLimit-Reset"].endswith("Z")


def test_rate_limit_exceeded(test_settings, store, upstream):
    limiter = RateLimiter(max_requests=2, window_ms=60_000)
    client = TestClient(
        create_app(config=test_settings, cache_store=store, rate_limiter=limiter, upstream=upstream)
    )

    assert client.get("/api/lastfm/cover-art/rel-1").status_code == 200
    assert client.get("/api/lastfm/cover-art/rel-1").status_code == 200

    response = client.get("/api/lastfm/cover-art/rel-1")
    assert response.status_code == 429
    assert response.json() == {"error": "Too many requests"}
    assert response.headers["X-RateLimit-Remaining"] == "0"
    assert int(response.headers["Retry-After"]) > 0

    other = client.get("/api/lastfm/cover-art/rel-1", headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1"})
    assert other.status_code == 200

    health = client.get("/health")
    assert health.status_code == 200
    assert health.headers["X-RateLimit-Remaining"] == "0"


def test_injected_components_are_kept(test_settings, store, upstream):
    """An empty limiter is still the one the app uses."""
    limiter = RateLimiter(max_requests=1, window_ms=60_000)
    assert len(limiter) == 0

    app = create_app(config=test_settings, cache_store=store, rate_limiter=limiter, upstream=upstream)

    assert app.state.rate_limiter is limiter
    assert app.state.cache_store is store
    assert app.state.upstream is upstream

    client = TestClient(app)
    first = client.get("/api/lastfm/cover-art/rel-1")
    assert first.headers["X-RateLimit-Limit"] == "1"
    assert client.get("/api/lastfm/cover-art/rel-1").status_code == 429


def test_get_stats(client):
    """Test get stats endpoint."""
    client.get("/api/lastfm/cover-art/rel-1")
    client.get("/api/lastfm/cover-art/rel-1")

    response = client.get("/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["backend"] == "memory"
    assert data["total_entries"] == 1
    assert data["metrics"]["cache_hits"] == 1
    assert data["metrics"]["cache_misses"] == 1
    assert data["metrics"]["hit_rate"] == 0.5
    assert data["ttl_seconds"]["USER_TRACKS"] == 10
    assert data["rate_limit"]["max_requests"] == 100


def test_delete_cache_entry(client, upstream):
    client.get("/api/lastfm/cover-art/rel-1")

    response = client.request("DELETE", "/cache", json={"url": "http://testserver/api/lastfm/cover-art/rel-1"})
    assert response.status_code == 200
    assert response.json() == {"deleted": True, "key": "http://testserver/api/lastfm/cover-art/rel-1"}

    refreshed = client.get("/api/lastfm/cover-art/rel-1")
    assert refreshed.headers["X-Cache"] == "MISS"
    assert len(upstream.calls) == 2


def test_delete_missing_cache_entry(client):
    response = client.request("DELETE", "/cache", json={"url": "http://testserver/api/lastfm/track-info?b=2&a=1"})
    assert response.json() == {"deleted": False, "key": "http://testserver/api/lastfm/track-info?a=1&b=2"}


def test_lifespan_closes_components(app, upstream, store):
    with TestClient(app) as client:
        client.get("/api/lastfm/cover-art/rel-1")
        assert upstream.closed is False

    assert upstream.closed is True
    assert store.backend._entries == {}
