"""Retry logic with exponential backoff for SeoWise."""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Optional, Callable, Any, Awaitable, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
)

from seowise.exceptions import (
    AuthenticationError,
    QuotaExceededError,
    RateLimitError,
    SeoWiseError,
    classify_error,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

NON_RETRYABLE_ERRORS = (AuthenticationError, QuotaExceededError)


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior. Delays are in milliseconds."""

    max_retries: int = 3
    base_delay_ms: float = 1000.0
    max_delay_ms: float = 60_000.0
    backoff_multiplier: float = 2.0
    jitter_fraction: float = 0.25

    def get_backoff(self) -> "ExponentialBackoff":
        """Get backoff configuration."""
        return ExponentialBackoff(
            base_delay_ms=self.base_delay_ms,
            max_delay_ms=self.max_delay_ms,
            multiplier=self.backoff_multiplier,
            jitter_fraction=self.jitter_fraction,
        )


@dataclass(frozen=True)
class ExponentialBackoff:
    """Exponential backoff with symmetric jitter."""

    base_delay_ms: float = 1000.0
    max_delay_ms: float = 60_000.0
    multiplier: float = 2.0
    jitter_fraction: float = 0.25

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay for a given attempt number.

        Args:
            attempt: The attempt that just failed (0-indexed).

        Returns:
            Delay in milliseconds.
        """
        delay = min(self.base_delay_ms * (self.multiplier ** attempt), self.max_delay_ms)

        if self.jitter_fraction:
            delay += delay * self.jitter_fraction * random.uniform(-1.0, 1.0)

        return max(0.0, round(delay))

    def delay_for(self, attempt: int, error: SeoWiseError) -> float:
        """Delay before retrying after ``error``.

        Server-provided rate limit hints are used as-is.
        """
        if isinstance(error, RateLimitError):
            return float(error.retry_after_ms)
        return self.calculate_delay(attempt)


def parse_retry_after(header_value: Optional[str]) -> Optional[float]:
    """Parse Retry-After header value.

    Args:
        header_value: The header value (seconds or HTTP date).

    Returns:
        Delay in seconds, or None if not parseable.
    """
    if header_value is None:
        return None

    try:
        return max(0.0, float(header_value))
    except ValueError:
        pass

    try:
        from email.utils import parsedate_to_datetime
        retry_date = parsedate_to_datetime(header_value)
        from datetime import datetime, timezone
        now = datetime.now(timezone.utc)
        delta = (retry_date - now).total_seconds()
        return max(0, delta)
    except (ValueError, TypeError):
        pass

    return None


def is_retryable(
    error: BaseException,
    should_retry: Optional[Callable[[SeoWiseError], bool]] = None,
) -> bool:
    """Check whether a classified error may be retried."""
    if not isinstance(error, SeoWiseError):
        return False
    if isinstance(error, NON_RETRYABLE_ERRORS):
        return False
    if should_retry is not None and not should_retry(error):
        return False
    return True


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    config: Optional[RetryConfig] = None,
    should_retry: Optional[Callable[[SeoWiseError], bool]] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    before_retry: Optional[Callable[[int, float, SeoWiseError], None]] = None,
) -> T:
    """Run ``operation``, retrying classified failures with backoff.

    Args:
        operation: Zero-argument coroutine function to call.
        config: Retry configuration.
        should_retry: Optional veto; returning False stops immediately.
        sleep: Coroutine used to wait between attempts (seconds).
        before_retry: Called with (attempt, delay_ms, error) before sleeping.
            Replaces the default retry warning when given.

    Returns:
        The operation's result.

    Raises:
        SeoWiseError: The last classified error once retries stop.
    """
    if config is None:
        config = RetryConfig()

    backoff = config.get_backoff()

    async def attempt() -> T:
        try:
            return await operation()
        except SeoWiseError:
            raise
        except Exception as e:
            raise classify_error(e) from e

    def wait(retry_state: RetryCallState) -> float:
        error = retry_state.outcome.exception()
        return backoff.delay_for(retry_state.attempt_number - 1, error) / 1000.0

    def log_retry(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception()
        delay_ms = retry_state.next_action.sleep * 1000.0
        if before_retry is not None:
            before_retry(retry_state.attempt_number, delay_ms, error)
            return
        logger.warning(
            f"Retry attempt {retry_state.attempt_number}/{config.max_retries} "
            f"after {delay_ms:.0f}ms delay: {error}"
        )

    retrying = AsyncRetrying(
        stop=stop_after_attempt(config.max_retries + 1),
        wait=wait,
        retry=retry_if_exception(lambda e: is_retryable(e, should_retry)),
        before_sleep=log_retry,
        sleep=sleep,
        reraise=True,
    )

    return await retrying(attempt)
