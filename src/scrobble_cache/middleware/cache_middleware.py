"""Read-through response cache middleware.

Bound per route to a CacheCategory. A hit is answered from the store
without running the route handler; a 200 miss is answered immediately and
written to the store by a background task after the response is sent.
"""

from collections.abc import Awaitable, Callable
from functools import lru_cache
from typing import ClassVar

from fastapi import Request, Response
from fastapi.routing import APIRoute
from starlette.background import BackgroundTask, BackgroundTasks

from scrobble_cache.entities import CacheCategory, CachedEntry, CacheKey
from scrobble_cache.key_codec import key_for_url
from scrobble_cache.logging import get_logger
from scrobble_cache.metrics import CacheMetrics
from scrobble_cache.services import CacheStore

logger = get_logger(__name__)

CACHE_HEADER = "X-Cache"
HIT = "HIT"
MISS = "MISS"

CallNext = Callable[[Request], Awaitable[Response]]

# Recomputed by Starlette for every response built from a stored body
_HOP_HEADERS = frozenset({"content-length", "transfer-encoding"})


def request_cache_key(request: Request) -> CacheKey:
    """Derive the cache key for an inbound request."""
    return key_for_url(str(request.url))


async def read_body(response: Response) -> bytes:
    """Read a response body, draining the iterator of streaming responses."""
    body = getattr(response, "body", None)
    if body is not None:
        return bytes(body)

    chunks: list[bytes] = []
    async for chunk in response.body_iterator:  # type: ignore[attr-defined]
        if isinstance(chunk, str):
            chunk = chunk.encode(response.charset)
        chunks.append(chunk)
    return b"".join(chunks)


def _storable_headers(response: Response) -> dict[str, str]:
    return {k: v for k, v in response.headers.items() if k.lower() not in _HOP_HEADERS}


class CacheMiddleware:
    """Cache interception around a route handler.

    Example:
        ```python
        middleware = CacheMiddleware(store=CacheStore(MemoryCacheBackend()))
        response = await middleware.dispatch(request, handler, CacheCategory.TRACK_INFO)
        response.headers["X-Cache"]  # "HIT" or "MISS"
        ```
    """

    def __init__(self, store: CacheStore, metrics: CacheMetrics | None = None) -> None:
        """Initialize the middleware.

        Args:
            store: Best-effort cache store (required).
            metrics: Hit/miss counters. Defaults to the store's metrics.
        """
        self._store = store
        self._metrics = metrics if metrics is not None else store.metrics

    async def dispatch(self, request: Request, call_next: CallNext, category: CacheCategory) -> Response:
        """Serve ``request`` from cache or through ``call_next``.

        Args:
            request: The inbound request
            call_next: Downstream handler; not invoked on a hit
            category: Selects the TTL of entries written for this route

        Returns:
            Stored response tagged ``X-Cache: HIT``, a fresh 200 tagged
            ``X-Cache: MISS``, or any other handler response unmodified
        """
        key = request_cache_key(request)

        entry = await self._store.get(key)
        if entry is not None:
            self._metrics.record_hit()
            logger.debug("Cache hit", key=str(key), category=category.name)
            return self._from_entry(entry)

        self._metrics.record_miss()
        response = await call_next(request)

        # Only 200 is cacheable; 201, 204 and the rest pass through untouched
        if response.status_code != 200:
            return response

        body = await read_body(response)
        headers = _storable_headers(response)
        entry = CachedEntry(status=response.status_code, headers=headers, body=body)

        fresh = Response(content=body, status_code=response.status_code, headers=headers)
        fresh.headers[CACHE_HEADER] = MISS
        fresh.background = self._with_cache_write(response.background, key, entry, category)
        return fresh

    def _with_cache_write(
        self,
        existing: BackgroundTask | None,
        key: CacheKey,
        entry: CachedEntry,
        category: CacheCategory,
    ) -> BackgroundTasks:
        tasks = BackgroundTasks()
        if existing is not None:
            tasks.tasks.append(existing)
        tasks.add_task(self._store.set, key, entry.clone(), category)
        return tasks

    @staticmethod
    def _from_entry(entry: CachedEntry) -> Response:
        response = Response(content=entry.body, status_code=entry.status, headers=entry.headers)
        response.headers[CACHE_HEADER] = HIT
        return response

    @property
    def store(self) -> CacheStore:
        """Get the underlying store (for testing)."""
        return self._store


class CachedRoute(APIRoute):
    """APIRoute whose handler runs behind the app's CacheMiddleware.

    The middleware instance is read from ``request.app.state.cache_middleware``
    so each app owns its own cache.
    """

    cache_category: ClassVar[CacheCategory]

    def get_route_handler(self) -> Callable[[Request], Awaitable[Response]]:
        handler = super().get_route_handler()
        category = self.cache_category

        async def cached_handler(request: Request) -> Response:
            middleware: CacheMiddleware = request.app.state.cache_middleware
            return await middleware.dispatch(request, handler, category)

        return cached_handler


@lru_cache
def cached_route(category: CacheCategory) -> type[APIRoute]:
    """Get the route class binding a handler to ``category``.

    Example:
        ```python
        router.add_api_route(
            "/track-info",
            get_track_info,
            methods=["GET"],
            route_class_override=cached_route(CacheCategory.TRACK_INFO),
        )
        ```
    """
    return type(f"{category.name.title().replace('_', '')}CachedRoute", (CachedRoute,), {"cache_category": category})
