"""Tests for error classification."""

import errno

import httpx
import pytest

from seowise.exceptions import (
    AuthenticationError,
    ConnectionError,
    QuotaExceededError,
    RateLimitError,
    SeoWiseError,
    classify_error,
)


def status_error(status, headers=None, json=None, text=None):
    request = httpx.Request("POST", "https://api.dataforseo.com/v3/test")
    if json is not None:
        response = httpx.Response(status, json=json, headers=headers, request=request)
    else:
        response = httpx.Response(status, text=text or "", headers=headers, request=request)
    return httpx.HTTPStatusError(f"HTTP {status}", request=request, response=response)


class TestClassifyError:
    """Tests for classify_error."""

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_statuses(self, status):
        """Test 401 and 403 classify as authentication errors."""
        error = classify_error(status_error(status, json={"status_message": "bad auth"}))

        assert isinstance(error, AuthenticationError)
        assert error.status_code == status
        assert error.response_body == {"status_message": "bad auth"}

    def test_rate_limit_with_retry_after(self):
        """Test 429 reads retry-after seconds into milliseconds."""
        error = classify_error(status_error(429, headers={"Retry-After": "5"}))

        assert isinstance(error, RateLimitError)
        assert error.status_code == 429
        assert error.retry_after_ms == 5000

    def test_rate_limit_default_retry_after(self):
        """Test 429 without retry-after defaults to 30 seconds."""
        error = classify_error(status_error(429))

        assert isinstance(error, RateLimitError)
        assert error.retry_after_ms == 30000

    def test_quota_exceeded(self):
        """Test 402 classifies as quota exceeded."""
        assert isinstance(classify_error(status_error(402)), QuotaExceededError)

    def test_other_status_is_generic(self):
        """Test other statuses keep their status code."""
        error = classify_error(status_error(500, text="boom"))

        assert type(error) is SeoWiseError
        assert error.status_code == 500
        assert error.response_body == "boom"

    def test_transport_error_is_network(self):
        """Test httpx transport failures classify as connection errors."""
        error = classify_error(httpx.ConnectError("connection refused"))

        assert isinstance(error, ConnectionError)
        assert error.status_code == 0

    def test_timeout_is_network(self):
        """Test timeouts classify as connection errors."""
        assert isinstance(classify_error(httpx.ReadTimeout("timed out")), ConnectionError)
        assert isinstance(classify_error(TimeoutError()), ConnectionError)

    def test_oserror_with_network_errno(self):
        """Test OSError with a network errno classifies as connection error."""
        error = OSError(errno.ENETUNREACH, "Network is unreachable")

        assert isinstance(classify_error(error), ConnectionError)

    def test_plain_exception_is_generic(self):
        """Test unknown exceptions keep their message."""
        error = classify_error(ValueError("weird"))

        assert type(error) is SeoWiseError
        assert error.message == "weird"
        assert error.status_code == 0

    def test_string_is_generic(self):
        """Test non-exception values are wrapped."""
        error = classify_error("something broke")

        assert type(error) is SeoWiseError
        assert str(error) == "something broke"

    def test_idempotent(self):
        """Test classified errors pass through unchanged."""
        original = RateLimitError(retry_after_ms=100)

        assert classify_error(original) is original
        assert classify_error(classify_error(status_error(401))).status_code == 401
