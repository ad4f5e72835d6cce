"""Rate limiting domain entities."""

from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass
class RateWindow:
    """Per-identity fixed window.

    Attributes:
        count: Requests seen in the current window
        reset_time: Epoch milliseconds at which the window ends
    """

    count: int
    reset_time: int


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single rate limit check."""

    allowed: bool
    remaining: int
    reset_time: int
    limit: int

    @property
    def reset_at(self) -> datetime:
        """Window end as an aware UTC datetime."""
        return datetime.fromtimestamp(self.reset_time / 1000, tz=timezone.utc)

    def retry_after(self, now: int) -> int:
        """Whole seconds from ``now`` (epoch ms) until the window resets."""
        return max(0, -(-(self.reset_time - now) // 1000))
