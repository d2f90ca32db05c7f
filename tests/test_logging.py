"""Tests for logging and credential redaction."""

import logging

from seowise.logging import LogConfig, MaskStyle, RequestLogger


class TestCredentialRedaction:
    """Tests for credential redaction in logs."""

    def test_redacts_basic_auth_header_in_logs(self, caplog):
        """Test Basic credentials never reach the log output."""
        logger = RequestLogger()

        with caplog.at_level(logging.DEBUG, logger="seowise"):
            logger.log_request(
                method="POST",
                url="https://api.dataforseo.com/v3/dataforseo_labs/google/keyword_suggestions/live",
                headers={"Authorization": "Basic dXNlcjpzM2NyZXQ="},
                request_id="test-123",
            )

        assert "dXNlcjpzM2NyZXQ=" not in caplog.text
        assert "keyword_suggestions" in caplog.text

    def test_redacts_authorization_header(self):
        """Test the Authorization header is fully masked by default."""
        redacted = RequestLogger().redact_headers({
            "Authorization": "Basic dXNlcjpzM2NyZXQ=",
            "Content-Type": "application/json",
        })

        assert redacted["Authorization"] == RequestLogger.REDACTION_PLACEHOLDER
        assert redacted["Content-Type"] == "application/json"

    def test_redacts_basic_token_in_free_text(self):
        """Test Basic tokens embedded in other values are masked."""
        redacted = RequestLogger().redact_body("auth failed for Basic dXNlcjpzM2NyZXQ=")

        assert "dXNlcjpzM2NyZXQ=" not in redacted

    def test_redacts_password_in_body(self):
        """Test passwords in structured bodies are masked."""
        redacted = RequestLogger().redact_body({"login": "user", "password": "hunter2"})

        assert "hunter2" not in redacted
        assert "user" in redacted

    def test_partial_mask(self):
        """Test partial masking keeps the edges of long values."""
        logger = RequestLogger(LogConfig(mask_style=MaskStyle.PARTIAL))

        redacted = logger.redact_headers({"Authorization": "Basic abcdefghijklmnop"})

        assert redacted["Authorization"] == "Basi...mnop"

    def test_hash_mask(self):
        """Test hash masking."""
        logger = RequestLogger(LogConfig(mask_style=MaskStyle.HASH))

        redacted = logger.redact_headers({"Authorization": "Basic abc"})

        assert redacted["Authorization"].startswith("[HASH:")


class TestRequestLogging:
    """Tests for request/response log records."""

    def test_request_id_generated(self):
        """Test a request ID is generated when none is given."""
        request_id = RequestLogger().log_request("GET", "https://api.dataforseo.com/v3/appendix/user_data")

        assert len(request_id) == 8

    def test_error_responses_log_as_warning(self, caplog):
        """Test 4xx responses are logged at WARNING."""
        with caplog.at_level(logging.INFO, logger="seowise"):
            RequestLogger().log_response(401, duration_ms=12.0, request_id="abc")

        record = caplog.records[-1]
        assert record.levelno == logging.WARNING
        assert "401" in record.getMessage()
        assert "12ms" in record.getMessage()

    def test_retry_logged(self, caplog):
        """Test retry warnings carry attempt details."""
        with caplog.at_level(logging.WARNING, logger="seowise"):
            RequestLogger().log_retry(1, 3, 1000, "Network error", request_id="abc")

        assert "Retry 1/3 after 1000ms" in caplog.text

    def test_error_message_redacted(self, caplog):
        """Test error messages are redacted before logging."""
        with caplog.at_level(logging.ERROR, logger="seowise"):
            RequestLogger().log_error(RuntimeError("bad header Basic dXNlcjpzM2NyZXQ="))

        assert "dXNlcjpzM2NyZXQ=" not in caplog.text
