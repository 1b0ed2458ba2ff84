"""In-memory fixed-window request bucket.

Notes:
- Per-process only: every client instance owns its own buckets.
- Thread-safe: uses a lock around the check-then-increment transition.
- Fixed window, not sliding: up to twice the limit can pass across a window
  boundary. That imprecision is accepted.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

from verify_client.adapters.rate_limit.base import AbstractRateLimiter, RateLimitSnapshot
from verify_client.core.errors import RateLimitExceeded

logger = logging.getLogger(__name__)

# Added to the remaining window time in the retry hint of a local rejection
RETRY_MARGIN_SECONDS = 5


class FixedWindowRateLimiter(AbstractRateLimiter):
    """Bucket allowing ``limit`` calls per ``period_seconds`` window.

    The window opens on the first call after the previous one expired, not on
    wall-clock boundaries. ``trigger`` pushes the window start into the future,
    so a triggered bucket stays exhausted for the retry hint plus one full
    period.
    """

    def __init__(
        self,
        *,
        limit: int,
        period_seconds: float,
        name: str = "bucket",
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the bucket.

        Args:
            limit: Maximum number of calls per window.
            period_seconds: Window length in seconds.
            name: Label used in logs.
            clock: Time source function returning UNIX time in seconds.

        Raises:
            ValueError: If limit or period_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if period_seconds <= 0:
            raise ValueError("period_seconds must be > 0")

        self._limit = limit
        self._period = period_seconds
        self._name = name
        self._clock = clock
        self._lock = threading.RLock()
        self._window_start: float | None = None
        self._count = 0

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return (
            f"FixedWindowRateLimiter(name={self._name!r}, limit={self._limit}, "
            f"period_seconds={self._period}, count={self._count})"
        )

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def period_seconds(self) -> float:
        return self._period

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def run(self) -> None:
        """Consume one unit of the current window.

        Raises:
            RateLimitExceeded: When the window is still active and exhausted.
                The rejected call does not count against the window.
        """
        with self._lock:
            now = self._clock()

            if self._window_start is None or now - self._window_start >= self._period:
                self._count = 0
                self._window_start = now
            elif self._count >= self._limit:
                retry_after = (self._window_start + self._period - now) + RETRY_MARGIN_SECONDS
                logger.warning(
                    "rate_limit.exceeded",
                    extra={
                        "bucket": self._name,
                        "limit": self._limit,
                        "window_s": self._period,
                        "retry_after_s": round(retry_after, 3),
                    },
                )
                raise RateLimitExceeded(
                    retry_after_seconds=retry_after,
                    details={"retry_after": retry_after},
                )

            self._count += 1
            logger.debug(
                "rate_limit.allowed",
                extra={
                    "bucket": self._name,
                    "count": self._count,
                    "limit": self._limit,
                },
            )

    def trigger(self, retry_after_seconds: float) -> None:
        """Mark the bucket exhausted as if the limit had just been hit.

        Args:
            retry_after_seconds: Seconds the remote service asked us to wait.

        Raises:
            ValueError: If retry_after_seconds is negative.
        """
        if retry_after_seconds < 0:
            raise ValueError("retry_after_seconds must be >= 0")

        with self._lock:
            now = self._clock()
            self._count = self._limit
            self._window_start = now + retry_after_seconds

        logger.warning(
            "rate_limit.triggered",
            extra={
                "bucket": self._name,
                "retry_after_s": retry_after_seconds,
                "blocked_for_s": retry_after_seconds + self._period,
            },
        )

    def snapshot(self) -> RateLimitSnapshot:
        with self._lock:
            reset_at = None
            if self._window_start is not None:
                reset_at = self._window_start + self._period
            return RateLimitSnapshot(
                limit=self._limit,
                period_seconds=self._period,
                count=self._count,
                remaining=max(0, self._limit - self._count),
                window_start=self._window_start,
                reset_at=reset_at,
            )
