"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
"""

from __future__ import annotations

import enum
import math
import threading
import time
from typing import Callable

from github_stats.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult


class WindowState(enum.Enum):
    WITHIN = "within"
    EXPIRED = "expired"


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Process-wide limiter counting admissions in a fixed window.

    The window starts on the first admission after a reset and lasts
    ``window_seconds``. Once it has elapsed, the next check resets the
    counter and opens a new window. Bursts straddling a window boundary
    can therefore admit up to ``2 * limit`` requests in quick succession.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of admissions per window.
            window_seconds: Size of the fixed window in seconds.
            clock: Time source function returning seconds.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._count = 0
        self._window_start: float | None = None

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def _window_state(self, now: float) -> WindowState:
        if self._window_start is None:
            return WindowState.EXPIRED
        if now - self._window_start >= self._window_seconds:
            return WindowState.EXPIRED
        return WindowState.WITHIN

    def check(self) -> RateLimitResult:
        """Check the current window and consume one admission if available.

        Returns:
            RateLimitResult with allowance decision and metadata.
        """
        with self._lock:
            now = self._clock()

            if self._window_state(now) is WindowState.EXPIRED:
                self._count = 0
                self._window_start = now

            reset_at = self._window_start + self._window_seconds

            if self._count < self._limit:
                self._count += 1
                return RateLimitResult(
                    allowed=True,
                    limit=self._limit,
                    remaining=self._limit - self._count,
                    reset_at=reset_at,
                    retry_after_seconds=None,
                )

            return RateLimitResult(
                allowed=False,
                limit=self._limit,
                remaining=0,
                reset_at=reset_at,
                retry_after_seconds=max(1, int(math.ceil(reset_at - now))),
            )
