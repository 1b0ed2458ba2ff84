"""Rate limiter interfaces.

The verification client depends on this abstraction, not on the concrete
bucket implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitSnapshot:
    """Read-only view of a bucket's current window.

    Attributes:
        limit: Max requests per window.
        period_seconds: Window length in seconds.
        count: Requests made in the current window.
        remaining: Requests still allowed in the current window.
        window_start: UNIX time the current window started (None before first use).
        reset_at: UNIX time the current window ends (None before first use).
    """

    limit: int
    period_seconds: float
    count: int
    remaining: int
    window_start: float | None
    reset_at: float | None


class AbstractRateLimiter(ABC):
    """Interface for a single request bucket."""

    @abstractmethod
    def run(self) -> None:
        """Record one use of the limited resource.

        Raises:
            RateLimitExceeded: If the current window has no budget left.
        """
        raise NotImplementedError

    @abstractmethod
    def trigger(self, retry_after_seconds: float) -> None:
        """Exhaust the bucket in response to an external throttle signal.

        Args:
            retry_after_seconds: Wait hint reported by the remote service.
        """
        raise NotImplementedError

    @abstractmethod
    def snapshot(self) -> RateLimitSnapshot:
        """Return the current window state without mutating it."""
        raise NotImplementedError
