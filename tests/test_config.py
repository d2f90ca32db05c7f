"""Tests for configuration validation and credential loading."""

import pytest

from seowise.config import (
    ClientConfig,
    Credentials,
    PRODUCTION_BASE_URL,
    SANDBOX_BASE_URL,
    create_config,
    load_credentials,
)
from seowise.exceptions import ConfigError


class TestCreateConfig:
    """Tests for create_config."""

    def test_defaults_applied(self):
        """Test partial input receives documented defaults."""
        config = create_config(username="user", password="pass")

        assert config.is_sandbox is False
        assert config.enable_caching is False
        assert config.caching_duration_days == 30
        assert config.timeout == 60000
        assert config.max_retries == 3
        assert config.rate_limit_per_minute == 30
        assert config.burst_limit == 10

    def test_settings_mapping_and_overrides(self):
        """Test keyword overrides take precedence over the mapping."""
        config = create_config({"username": "a", "password": "b", "max_retries": 1}, max_retries=5)

        assert config.username == "a"
        assert config.max_retries == 5

    def test_empty_username_rejected(self):
        """Test empty username fails validation."""
        with pytest.raises(ConfigError) as exc_info:
            create_config(username="", password="pass")

        assert any(issue.startswith("username") for issue in exc_info.value.issues)

    def test_blank_password_rejected(self):
        """Test whitespace-only password fails validation."""
        with pytest.raises(ConfigError):
            create_config(username="user", password="   ")

    def test_all_violations_reported(self):
        """Test every invalid field is listed, not just the first."""
        with pytest.raises(ConfigError) as exc_info:
            create_config(
                username="",
                password="",
                timeout=0,
                max_retries=-1,
                rate_limit_per_minute=0,
                caching_duration_days=-5,
            )

        fields = {issue.split(":")[0] for issue in exc_info.value.issues}
        assert fields == {
            "username",
            "password",
            "timeout",
            "max_retries",
            "rate_limit_per_minute",
            "caching_duration_days",
        }
        assert "Invalid client config" in str(exc_info.value)

    def test_missing_credentials_rejected(self):
        """Test missing credentials fail validation."""
        with pytest.raises(ConfigError) as exc_info:
            create_config()

        assert len(exc_info.value.issues) == 2

    def test_zero_retries_allowed(self):
        """Test max_retries may be zero."""
        config = create_config(username="user", password="pass", max_retries=0)

        assert config.max_retries == 0

    def test_unknown_field_rejected(self):
        """Test unknown settings are rejected."""
        with pytest.raises(ConfigError):
            create_config(username="user", password="pass", retries=3)

    def test_string_numbers_rejected(self):
        """Test numeric fields are not coerced from strings."""
        with pytest.raises(ConfigError):
            create_config(username="user", password="pass", timeout="1000")

    def test_config_is_immutable(self):
        """Test config cannot be mutated after creation."""
        config = create_config(username="user", password="pass")

        with pytest.raises(Exception):
            config.timeout = 10

    def test_base_url_follows_sandbox_flag(self):
        """Test base URL selection."""
        production = create_config(username="user", password="pass")
        sandbox = create_config(username="user", password="pass", is_sandbox=True)

        assert production.base_url == PRODUCTION_BASE_URL
        assert sandbox.base_url == SANDBOX_BASE_URL

    def test_cache_ttl_in_seconds(self):
        """Test caching duration is converted to seconds."""
        config = create_config(username="user", password="pass", caching_duration_days=2)

        assert config.cache_ttl_seconds == 2 * 86400

    def test_returns_client_config(self):
        """Test the validated type."""
        assert isinstance(create_config(username="u", password="p"), ClientConfig)


class TestLoadCredentials:
    """Tests for load_credentials."""

    def test_environment_wins(self):
        """Test environment credentials take precedence over local ones."""
        creds = load_credentials(
            environ={"DATAFORSEO_LOGIN": "env-user", "DATAFORSEO_PASSWORD": "env-pass"},
            local={"DATAFORSEO_USERNAME": "local-user", "DATAFORSEO_PASSWORD": "local-pass"},
        )

        assert creds.username == "env-user"
        assert creds.password == "env-pass"
        assert creds.source == "environment"

    def test_falls_back_to_local(self):
        """Test local credentials are used when the environment is incomplete."""
        creds = load_credentials(
            environ={"DATAFORSEO_LOGIN": "env-user"},
            local={"DATAFORSEO_USERNAME": "local-user", "DATAFORSEO_PASSWORD": "local-pass"},
        )

        assert creds.username == "local-user"
        assert creds.source == "local"

    def test_no_credentials(self):
        """Test missing credentials raise ConfigError."""
        with pytest.raises(ConfigError, match="No credentials available"):
            load_credentials(environ={}, local={})

    def test_reads_os_environ_by_default(self, monkeypatch):
        """Test os.environ is the default environment."""
        monkeypatch.setenv("DATAFORSEO_LOGIN", "os-user")
        monkeypatch.setenv("DATAFORSEO_PASSWORD", "os-pass")

        creds = load_credentials()

        assert creds.username == "os-user"

    def test_repr_masks_password(self):
        """Test the password never appears in repr."""
        creds = Credentials(username="user", password="hunter2")

        assert "hunter2" not in repr(creds)
