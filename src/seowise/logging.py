"""Request logging with credential redaction for SeoWise."""

import hashlib
import json
import logging
import re
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, List, Any, Pattern

LOGGER_NAME = "seowise"


class MaskStyle(str, Enum):
    """How sensitive values are rendered in logs."""
    FULL = "full"
    PARTIAL = "partial"
    HASH = "hash"


@dataclass
class LogConfig:
    """Configuration for request logging."""

    log_request_headers: bool = True
    log_request_body: bool = False
    log_response_body: bool = False
    log_timing: bool = True
    redact_headers: List[str] = field(
        default_factory=lambda: [
            "authorization",
            "proxy-authorization",
            "cookie",
            "set-cookie",
        ]
    )
    redact_patterns: List[str] = field(
        default_factory=lambda: [
            r"password[\"\']?\s*[:=]\s*[\"\']?([^\s\"\'&,}]+)",
            r"token[\"\']?\s*[:=]\s*[\"\']?([^\s\"\'&,}]+)",
            r"secret[\"\']?\s*[:=]\s*[\"\']?([^\s\"\'&,}]+)",
            r"Bearer\s+([^\s\"\']+)",
            r"Basic\s+([^\s\"\']+)",
        ]
    )
    mask_style: MaskStyle = MaskStyle.FULL
    partial_mask_chars: int = 4


class RequestLogger:
    """Logs DataForSEO requests and responses without leaking credentials."""

    REDACTION_PLACEHOLDER = "***REDACTED***"

    def __init__(self, config: Optional[LogConfig] = None) -> None:
        self.config = config or LogConfig()
        self.logger = logging.getLogger(LOGGER_NAME)
        self._compiled_patterns: List[Pattern] = [
            re.compile(pattern, re.IGNORECASE)
            for pattern in self.config.redact_patterns
        ]

    def _mask_value(self, value: str) -> str:
        if self.config.mask_style == MaskStyle.PARTIAL:
            chars = self.config.partial_mask_chars
            if len(value) <= chars * 2:
                return "****"
            return f"{value[:chars]}...{value[-chars:]}"

        if self.config.mask_style == MaskStyle.HASH:
            return f"[HASH:{hashlib.sha256(value.encode()).hexdigest()[:8]}]"

        return self.REDACTION_PLACEHOLDER

    def _redact_value(self, value: str) -> str:
        result = value

        def replacer(match: "re.Match") -> str:
            full_match = match.group(0)
            sensitive = match.group(1) if match.lastindex else full_match
            return full_match.replace(sensitive, self._mask_value(sensitive))

        for pattern in self._compiled_patterns:
            result = pattern.sub(replacer, result)

        return result

    def redact_headers(self, headers: Dict[str, str]) -> Dict[str, str]:
        """Redact sensitive headers.

        Args:
            headers: Request or response headers.

        Returns:
            A copy with sensitive values masked.
        """
        redact_set = {h.lower() for h in self.config.redact_headers}
        redacted = {}

        for key, value in headers.items():
            if key.lower() in redact_set:
                redacted[key] = self._mask_value(value)
            else:
                redacted[key] = self._redact_value(value)

        return redacted

    def redact_body(self, body: Any) -> str:
        """Render a request/response body with secrets masked."""
        if not isinstance(body, str):
            body = json.dumps(body, default=str)
        return self._redact_value(body)

    def log_request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        body: Optional[Any] = None,
        request_id: Optional[str] = None,
    ) -> str:
        """Log an outgoing request.

        Returns:
            Request ID for correlation.
        """
        request_id = request_id or str(uuid.uuid4())[:8]

        self.logger.info(
            f"Request started: {method} {url}",
            extra={"request_id": request_id, "method": method, "url": url},
        )

        if self.config.log_request_headers and headers:
            redacted_headers = self.redact_headers(headers)
            self.logger.debug(
                f"Request headers: {redacted_headers}",
                extra={"request_id": request_id},
            )

        if self.config.log_request_body and body is not None:
            self.logger.debug(
                f"Request body: {self.redact_body(body)}",
                extra={"request_id": request_id},
            )

        return request_id

    def log_response(
        self,
        status_code: int,
        duration_ms: Optional[float] = None,
        body: Optional[Any] = None,
        request_id: Optional[str] = None,
    ) -> None:
        """Log a received response."""
        extra: Dict[str, Any] = {"request_id": request_id, "status_code": status_code}

        message = f"Response: {status_code}"
        if self.config.log_timing and duration_ms is not None:
            extra["duration_ms"] = duration_ms
            message += f" ({duration_ms:.0f}ms)"

        level = logging.INFO if status_code < 400 else logging.WARNING
        self.logger.log(level, message, extra=extra)

        if self.config.log_response_body and body is not None:
            self.logger.debug(
                f"Response body: {self.redact_body(body)}",
                extra={"request_id": request_id},
            )

    def log_error(
        self,
        error: BaseException,
        request_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Log a failed request."""
        extra: Dict[str, Any] = {
            "request_id": request_id,
            "error_type": type(error).__name__,
        }
        if context:
            extra.update(context)

        self.logger.error(f"Request error: {self._redact_value(str(error))}", extra=extra)

    def log_retry(
        self,
        attempt: int,
        max_attempts: int,
        delay_ms: float,
        reason: str,
        request_id: Optional[str] = None,
    ) -> None:
        """Log a scheduled retry."""
        self.logger.warning(
            f"Retry {attempt}/{max_attempts} after {delay_ms:.0f}ms: {reason}",
            extra={
                "request_id": request_id,
                "attempt": attempt,
                "max_attempts": max_attempts,
                "delay_ms": delay_ms,
            },
        )

    def log_rate_limited(self, retry_after_ms: Optional[int], request_id: Optional[str] = None) -> None:
        """Log a request refused by the local rate limiter."""
        self.logger.warning(
            f"Rate limited locally, retry after {retry_after_ms}ms",
            extra={"request_id": request_id, "retry_after_ms": retry_after_ms},
        )


def setup_logging(
    level: str = "INFO",
    format_string: Optional[str] = None,
) -> None:
    """Set up logging for SeoWise.

    Args:
        level: Log level.
        format_string: Custom format string.
    """
    if format_string is None:
        format_string = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format=format_string,
    )
