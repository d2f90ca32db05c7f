"""Client-side admission control for SeoWise.

Three layers are enforced, in order:

1. An escalating backoff armed by explicit rate limit violations. Each
   consecutive violation doubles the backoff (30s, 60s, 120s, ... capped at
   300s). A success signal resets the escalation.
2. A 60 second sliding window capped at ``max_per_minute`` admissions.
3. A 10 second burst window capped at ``burst_max`` admissions.
"""

import logging
import math
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional

logger = logging.getLogger(__name__)

WINDOW_MS = 60_000
BURST_WINDOW_MS = 10_000
BASE_BACKOFF_SECONDS = 30
MAX_BACKOFF_SECONDS = 300


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of an admission check."""

    allowed: bool
    retry_after_ms: Optional[int] = None


class RateLimiter:
    """Sliding-window rate limiter with burst control and escalating backoff."""

    def __init__(
        self,
        max_per_minute: int = 30,
        burst_max: int = 10,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize rate limiter.

        Args:
            max_per_minute: Admissions allowed in any 60 second window.
            burst_max: Admissions allowed in any 10 second window.
            clock: Monotonic clock returning seconds.
        """
        self.max_per_minute = max_per_minute
        self.burst_max = burst_max
        self._clock = clock

        self._timestamps: Deque[float] = deque()
        self._consecutive_violations = 0
        self._backoff_until = 0.0
        self._lock = threading.RLock()

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    @property
    def consecutive_violations(self) -> int:
        """Number of violations since the last success."""
        return self._consecutive_violations

    def can_proceed(self) -> RateLimitResult:
        """Check admission and record it when granted."""
        with self._lock:
            now = self._now_ms()

            if now < self._backoff_until:
                return RateLimitResult(
                    allowed=False,
                    retry_after_ms=math.ceil(self._backoff_until - now),
                )

            while self._timestamps and now - self._timestamps[0] >= WINDOW_MS:
                self._timestamps.popleft()

            if len(self._timestamps) >= self.max_per_minute:
                oldest = self._timestamps[0]
                return RateLimitResult(
                    allowed=False,
                    retry_after_ms=math.ceil(WINDOW_MS - (now - oldest)),
                )

            in_burst = [t for t in self._timestamps if now - t < BURST_WINDOW_MS]
            if len(in_burst) >= self.burst_max:
                return RateLimitResult(
                    allowed=False,
                    retry_after_ms=math.ceil(BURST_WINDOW_MS - (now - in_burst[0])),
                )

            self._timestamps.append(now)
            return RateLimitResult(allowed=True)

    def record_violation(self) -> int:
        """Arm the escalating backoff after a rate limit violation.

        Returns:
            The backoff just armed, in milliseconds.
        """
        with self._lock:
            self._consecutive_violations += 1
            backoff_seconds = min(
                BASE_BACKOFF_SECONDS * 2 ** (self._consecutive_violations - 1),
                MAX_BACKOFF_SECONDS,
            )
            self._backoff_until = self._now_ms() + backoff_seconds * 1000
            violations = self._consecutive_violations

        logger.warning(
            f"Rate limit violation #{violations}, "
            f"backing off for {backoff_seconds}s"
        )
        return backoff_seconds * 1000

    def record_success(self) -> None:
        """Reset backoff escalation."""
        with self._lock:
            self._consecutive_violations = 0

    def reset(self) -> None:
        """Forget all admissions and backoff state."""
        with self._lock:
            self._timestamps.clear()
            self._consecutive_violations = 0
            self._backoff_until = 0.0
