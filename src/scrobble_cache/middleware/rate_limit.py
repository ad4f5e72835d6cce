"""Rate limiting middleware for FastAPI."""

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp

from scrobble_cache.entities import RateLimitResult
from scrobble_cache.services import RateLimiter


def client_identifier(request: Request) -> str:
    """Extract the client identity used as the rate limit key."""
    connecting_ip = request.headers.get("CF-Connecting-IP")
    if connecting_ip:
        return connecting_ip.strip()

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else "unknown"


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    """Headers describing the caller's current window."""
    reset = result.reset_at.isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": reset,
    }


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Throttle requests per client before they reach any route."""

    def __init__(
        self,
        app: ASGIApp,
        limiter: RateLimiter,
        exempt_paths: tuple[str, ...] = ("/health",),
    ) -> None:
        super().__init__(app)
        self.limiter = limiter
        self.exempt_paths = exempt_paths

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        identifier = client_identifier(request)

        # Exempt paths report the window but never consume from it
        if request.url.path in self.exempt_paths:
            response = await call_next(request)
            response.headers.update(rate_limit_headers(self.limiter.peek(identifier)))
            return response

        result = self.limiter.check(identifier)
        headers = rate_limit_headers(result)

        if not result.allowed:
            headers["Retry-After"] = str(result.retry_after(self.limiter.now()))
            return JSONResponse(
                {"error": "Too many requests"},
                status_code=429,
                headers=headers,
            )

        response = await call_next(request)
        response.headers.update(headers)
        return response
