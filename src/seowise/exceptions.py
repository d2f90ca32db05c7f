"""Custom exceptions and error classification for SeoWise."""

import asyncio
import builtins
import errno
from typing import Optional, Any, List

import httpx

DEFAULT_RETRY_AFTER_MS = 30_000

NETWORK_ERRNOS = {
    errno.ECONNREFUSED,
    errno.ECONNABORTED,
    errno.ECONNRESET,
    errno.ETIMEDOUT,
    errno.ENETUNREACH,
}


class SeoWiseError(Exception):
    """Base exception for all SeoWise errors.

    Also used directly as the generic classified error: it carries the
    upstream status code (0 when there was no HTTP response) and the raw
    response body when one was available.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        response_body: Optional[Any] = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message)


class AuthenticationError(SeoWiseError):
    """Raised when credentials are rejected (401/403)."""

    pass


class RateLimitError(SeoWiseError):
    """Raised when the upstream API or the local limiter refuses a request."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        status_code: int = 429,
        retry_after_ms: int = DEFAULT_RETRY_AFTER_MS,
        response_body: Optional[Any] = None,
    ) -> None:
        self.retry_after_ms = retry_after_ms
        super().__init__(message, status_code=status_code, response_body=response_body)


class ConnectionError(SeoWiseError):
    """Raised when the server could not be reached."""

    def __init__(
        self,
        message: str = "Network error",
        response_body: Optional[Any] = None,
    ) -> None:
        super().__init__(message, status_code=0, response_body=response_body)


class QuotaExceededError(SeoWiseError):
    """Raised when the account balance is exhausted (402)."""

    pass


class ConfigError(SeoWiseError):
    """Raised when client configuration fails validation."""

    def __init__(self, message: str, issues: Optional[List[str]] = None) -> None:
        self.issues = issues or []
        super().__init__(message)


def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except (ValueError, UnicodeDecodeError):
        return response.text


def _retry_after_ms(response: httpx.Response) -> int:
    from seowise.retry import parse_retry_after

    seconds = parse_retry_after(response.headers.get("retry-after"))
    if seconds is None:
        return DEFAULT_RETRY_AFTER_MS
    return int(seconds * 1000)


def _is_network_failure(error: BaseException) -> bool:
    if isinstance(error, httpx.TransportError):
        return True
    if isinstance(error, (builtins.ConnectionError, builtins.TimeoutError, asyncio.TimeoutError)):
        return True
    return isinstance(error, OSError) and error.errno in NETWORK_ERRNOS


def classify_error(error: Any) -> SeoWiseError:
    """Map any failure onto the SeoWise error taxonomy.

    Args:
        error: An exception, or any other value raised or rejected.

    Returns:
        Exactly one classified error. Already classified errors are
        returned unchanged.
    """
    if isinstance(error, SeoWiseError):
        return error

    if isinstance(error, httpx.HTTPStatusError):
        response = error.response
        status = response.status_code
        body = _response_body(response)
        message = str(error) or f"HTTP {status}"

        if status in (401, 403):
            return AuthenticationError(message, status_code=status, response_body=body)

        if status == 429:
            return RateLimitError(
                message,
                status_code=status,
                retry_after_ms=_retry_after_ms(response),
                response_body=body,
            )

        if status == 402:
            return QuotaExceededError(message, status_code=status, response_body=body)

        return SeoWiseError(message, status_code=status, response_body=body)

    if isinstance(error, BaseException) and _is_network_failure(error):
        return ConnectionError(str(error) or type(error).__name__)

    if isinstance(error, BaseException):
        return SeoWiseError(str(error) or type(error).__name__)

    return SeoWiseError(str(error))
