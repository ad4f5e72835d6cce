from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from scrobble_cache.api.dependencies import CacheStoreDep, RateLimiterDep, lifespan
from scrobble_cache.api.routes import create_router
from scrobble_cache.clients import HttpxUpstreamClient
from scrobble_cache.config import APP_VERSION, Settings, settings
from scrobble_cache.dto import (
    CacheDeleteRequest,
    CacheDeleteResponse,
    CacheStatsResponse,
    HealthCheckResponse,
)
from scrobble_cache.errors import UpstreamError
from scrobble_cache.handlers import MusicHandler
from scrobble_cache.key_codec import key_for_url
from scrobble_cache.logging import configure_logging
from scrobble_cache.middleware import CacheMiddleware, RateLimitMiddleware
from scrobble_cache.protocols import UpstreamClient
from scrobble_cache.services import CacheStore, RateLimiter
from scrobble_cache.ttl_policy import TTL_TABLE


async def upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    """Render upstream failures as ``{"error": message}``."""
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


def create_app(
    config: Settings | None = None,
    cache_store: CacheStore | None = None,
    rate_limiter: RateLimiter | None = None,
    upstream: UpstreamClient | None = None,
) -> FastAPI:
    """Build the application with explicitly constructed components.

    Every component defaults to one built from ``config``; tests pass their
    own instances to get an isolated app.

    Args:
        config: Settings. Defaults to global settings.
        cache_store: Response cache. Defaults to CacheStore.create(config).
        rate_limiter: Request throttle. Defaults to RateLimiter.create(config).
        upstream: Outbound HTTP client. Defaults to HttpxUpstreamClient.create(config).

    Returns:
        Configured FastAPI application
    """
    config = config or settings
    configure_logging(config.log_level)

    if cache_store is None:
        cache_store = CacheStore.create(config)
    if rate_limiter is None:
        rate_limiter = RateLimiter.create(config)
    if upstream is None:
        upstream = HttpxUpstreamClient.create(config)

    app = FastAPI(
        title="Scrobble Cache API",
        description="Caching proxy for Last.fm, MusicBrainz and Cover Art Archive",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    # Store in app.state (FastAPI pattern)
    app.state.settings = config
    app.state.cache_store = cache_store
    app.state.cache_middleware = CacheMiddleware(store=cache_store)
    app.state.rate_limiter = rate_limiter
    app.state.upstream = upstream
    app.state.music_handler = MusicHandler(upstream=upstream, config=config)

    # Last added runs first: CORS wraps the rate limiter so 429s carry CORS headers
    app.add_middleware(RateLimitMiddleware, limiter=rate_limiter)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_methods=["GET", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Cache", "X-RateLimit-Limit", "X-RateLimit-Remaining", "X-RateLimit-Reset"],
    )

    app.add_exception_handler(UpstreamError, upstream_error_handler)  # type: ignore[arg-type]
    app.include_router(create_router())

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "Scrobble Cache API",
            "version": APP_VERSION,
            "endpoints": {
                "user_tracks": "/api/lastfm/user-tracks/{username}",
                "track_info": "/api/lastfm/track-info",
                "mb_releases": "/api/lastfm/mb-releases",
                "mb_release": "/api/lastfm/mb-release/{mbid}",
                "cover_art": "/api/lastfm/cover-art/{mbid}",
                "stats": "/stats",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(store: CacheStoreDep) -> JSONResponse:
        """Health check endpoint."""
        is_healthy = await store.is_healthy()
        body = HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            cache_healthy=is_healthy,
        )
        return JSONResponse(body.model_dump(), status_code=200 if is_healthy else 503)

    @app.get("/stats", response_model=CacheStatsResponse)
    async def stats(store: CacheStoreDep, limiter: RateLimiterDep) -> CacheStatsResponse:
        """Cache metrics and rate limiter state."""
        return CacheStatsResponse(
            backend=config.cache_backend,
            total_entries=await store.count(),
            metrics=store.metrics.to_dict(),
            ttl_seconds={category.name: ttl for category, ttl in TTL_TABLE.items()},
            rate_limit={
                "max_requests": limiter.max_requests,
                "window_ms": limiter.window_ms,
                "tracked_clients": len(limiter),
            },
        )

    @app.delete("/cache", response_model=CacheDeleteResponse)
    async def delete_cache_entry(request: CacheDeleteRequest, store: CacheStoreDep) -> CacheDeleteResponse:
        """Invalidate the cached response for a request URL."""
        key = key_for_url(request.url)
        deleted = await store.delete(key)
        return CacheDeleteResponse(deleted=deleted, key=str(key))

    return app


app = create_app()


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "scrobble_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    main()
