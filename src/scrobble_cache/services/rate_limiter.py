"""Fixed-window rate limiter.

State is process-local and lost on restart; throttling is approximate by
design of the deployment, not exact accounting.
"""

import time
from collections.abc import Callable

from scrobble_cache.config import Settings, settings
from scrobble_cache.entities import RateLimitResult, RateWindow
from scrobble_cache.logging import get_logger

logger = get_logger(__name__)


def now_ms() -> int:
    """Current Unix time in milliseconds."""
    return int(time.time() * 1000)


class RateLimiter:
    """Per-identity fixed-window request throttle.

    A window opens on the first request from an identity and lasts
    ``window_ms``. The counter resets entirely when a request arrives after
    the window has ended; there is no sliding or token refill.

    Example:
        ```python
        limiter = RateLimiter(max_requests=100, window_ms=60_000)
        result = limiter.check("203.0.113.7")
        if not result.allowed:
            ...  # reject until result.reset_at
        ```
    """

    def __init__(
        self,
        max_requests: int = 100,
        window_ms: int = 60_000,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """Initialize the rate limiter.

        Args:
            max_requests: Requests allowed per window.
            window_ms: Window length in milliseconds.
            clock: Source of Unix time in milliseconds (injectable for tests).
        """
        if max_requests <= 0 or window_ms <= 0:
            raise ValueError("max_requests and window_ms must be positive")
        self._max_requests = max_requests
        self._window_ms = window_ms
        self._clock = clock
        self._windows: dict[str, RateWindow] = {}

    @classmethod
    def create(cls, config: Settings | None = None) -> "RateLimiter":
        """Factory method reading limits from settings."""
        config = config or settings
        return cls(
            max_requests=config.rate_limit_max_requests,
            window_ms=config.rate_limit_window_ms,
        )

    def check(self, identifier: str) -> RateLimitResult:
        """Count a request from ``identifier`` and decide whether to allow it.

        Args:
            identifier: Opaque client identity (e.g. connecting IP)

        Returns:
            RateLimitResult with the decision, remaining budget and window end
        """
        now = self._clock()
        window = self._windows.get(identifier)

        if window is None or now > window.reset_time:
            reset_time = now + self._window_ms
            self._windows[identifier] = RateWindow(count=1, reset_time=reset_time)
            return RateLimitResult(
                allowed=True,
                remaining=self._max_requests - 1,
                reset_time=reset_time,
                limit=self._max_requests,
            )

        if window.count >= self._max_requests:
            logger.info("Rate limit exceeded", identifier=identifier, limit=self._max_requests)
            return RateLimitResult(
                allowed=False,
                remaining=0,
                reset_time=window.reset_time,
                limit=self._max_requests,
            )

        window.count += 1
        return RateLimitResult(
            allowed=True,
            remaining=self._max_requests - window.count,
            reset_time=window.reset_time,
            limit=self._max_requests,
        )

    def peek(self, identifier: str) -> RateLimitResult:
        """Report the state of ``identifier``'s window without counting a request."""
        now = self._clock()
        window = self._windows.get(identifier)

        if window is None or now > window.reset_time:
            return RateLimitResult(
                allowed=True,
                remaining=self._max_requests,
                reset_time=now + self._window_ms,
                limit=self._max_requests,
            )

        return RateLimitResult(
            allowed=window.count < self._max_requests,
            remaining=max(0, self._max_requests - window.count),
            reset_time=window.reset_time,
            limit=self._max_requests,
        )

    def cleanup(self) -> int:
        """Remove every window whose reset time has passed.

        Returns:
            Number of windows removed
        """
        now = self._clock()
        expired = [key for key, window in self._windows.items() if now > window.reset_time]
        for key in expired:
            del self._windows[key]
        return len(expired)

    def now(self) -> int:
        """Current time according to the limiter clock, in epoch milliseconds."""
        return self._clock()

    def __len__(self) -> int:
        return len(self._windows)

    @property
    def max_requests(self) -> int:
        """Get the per-window request budget."""
        return self._max_requests

    @property
    def window_ms(self) -> int:
        """Get the window length in milliseconds."""
        return self._window_ms
