"""Dependency injection configuration for the FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services are constructed by create_app and stored in app.state
    - Dependency functions retrieve them from request.app.state
    - The lifespan owns background scheduling and teardown
"""

import asyncio
import contextlib
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from scrobble_cache.handlers import MusicHandler
from scrobble_cache.logging import get_logger
from scrobble_cache.services import CacheStore, RateLimiter

logger = get_logger(__name__)


def get_music_handler(request: Request) -> MusicHandler:
    """Dependency injection for MusicHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "music_handler", None)
    if handler is None:
        raise RuntimeError("MusicHandler not initialized. Check create_app setup.")
    return handler


def get_cache_store(request: Request) -> CacheStore:
    """Dependency injection for CacheStore from app.state.

    Raises:
        RuntimeError: If store is not initialized
    """
    store = getattr(request.app.state, "cache_store", None)
    if store is None:
        raise RuntimeError("CacheStore not initialized. Check create_app setup.")
    return store


def get_rate_limiter(request: Request) -> RateLimiter:
    """Dependency injection for RateLimiter from app.state."""
    limiter = getattr(request.app.state, "rate_limiter", None)
    if limiter is None:
        raise RuntimeError("RateLimiter not initialized. Check create_app setup.")
    return limiter


async def sweep_rate_limits(limiter: RateLimiter, interval: float) -> None:
    """Periodically drop expired rate limit windows until cancelled."""
    while True:
        await asyncio.sleep(interval)
        removed = limiter.cleanup()
        if removed:
            logger.debug("Rate limit windows swept", removed=removed, remaining=len(limiter))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Startup:
        Schedules the rate limiter sweep every ``rate_limit_cleanup_interval`` seconds.

    Cleanup:
        Cancels the sweep, closes the upstream client and the cache backend.
    """
    config = app.state.settings
    sweeper = asyncio.create_task(
        sweep_rate_limits(app.state.rate_limiter, config.rate_limit_cleanup_interval)
    )

    logger.info(
        "Scrobble cache started",
        cache_backend=config.cache_backend,
        rate_limit=config.rate_limit_max_requests,
        rate_window_ms=config.rate_limit_window_ms,
    )

    yield

    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper

    await app.state.upstream.close()
    await app.state.cache_store.close()
    logger.info("Scrobble cache shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[MusicHandler, Depends(get_music_handler)]
CacheStoreDep = Annotated[CacheStore, Depends(get_cache_store)]
RateLimiterDep = Annotated[RateLimiter, Depends(get_rate_limiter)]
