"""Per-session API usage tracking for SeoWise."""

import math
import threading

from seowise.models import ApiMetrics


class MetricsTracker:
    """Running counters for requests, cost and latency."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.reset()

    def record_request(self, duration_ms: float, cost: float, success: bool) -> None:
        """Record one completed request attempt."""
        with self._lock:
            self._requests_made += 1
            self._total_response_time_ms += duration_ms
            self._credits_used += cost
            if success:
                self._successful_requests += 1
            else:
                self._failed_requests += 1

    def record_rate_limit_hit(self) -> None:
        """Record a request refused for rate limiting."""
        with self._lock:
            self._rate_limit_hits += 1

    def get_metrics(self) -> ApiMetrics:
        """Get a snapshot of the counters."""
        with self._lock:
            avg = 0
            if self._requests_made > 0:
                avg = int(math.floor(self._total_response_time_ms / self._requests_made + 0.5))

            return ApiMetrics(
                requests_made=self._requests_made,
                credits_used=self._credits_used,
                successful_requests=self._successful_requests,
                failed_requests=self._failed_requests,
                rate_limit_hits=self._rate_limit_hits,
                avg_response_time_ms=avg,
            )

    def reset(self) -> None:
        """Reset all counters."""
        with self._lock:
            self._requests_made = 0
            self._credits_used = 0.0
            self._successful_requests = 0
            self._failed_requests = 0
            self._rate_limit_hits = 0
            self._total_response_time_ms = 0.0
