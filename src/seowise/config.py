"""Client configuration and credential loading for SeoWise."""

import os
from dataclasses import dataclass
from typing import Optional, Dict, Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from seowise.exceptions import ConfigError

PRODUCTION_BASE_URL = "https://api.dataforseo.com/v3"
SANDBOX_BASE_URL = "https://sandbox.dataforseo.com/v3"

ENV_USERNAME = "DATAFORSEO_LOGIN"
ENV_PASSWORD = "DATAFORSEO_PASSWORD"
LOCAL_USERNAME = "DATAFORSEO_USERNAME"
LOCAL_PASSWORD = "DATAFORSEO_PASSWORD"


class ClientConfig(BaseModel):
    """Validated configuration for a SeoWise client.

    Timeouts are expressed in milliseconds.
    """

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    username: str = Field(..., min_length=1, description="API login")
    password: str = Field(..., min_length=1, description="API password")
    is_sandbox: bool = Field(default=False, description="Use the sandbox API")
    enable_caching: bool = Field(default=False, description="Cache successful responses")
    caching_duration_days: int = Field(default=30, gt=0, description="Cache TTL in days")
    timeout: int = Field(default=60_000, gt=0, description="Request timeout in ms")
    max_retries: int = Field(default=3, ge=0, description="Maximum retry attempts")
    rate_limit_per_minute: int = Field(default=30, gt=0, description="Admissions per 60s")
    burst_limit: int = Field(default=10, gt=0, description="Admissions per 10s")

    @field_validator("username", "password")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject whitespace-only credentials."""
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @property
    def base_url(self) -> str:
        """API base URL for the selected mode."""
        return SANDBOX_BASE_URL if self.is_sandbox else PRODUCTION_BASE_URL

    @property
    def cache_ttl_seconds(self) -> int:
        """Cache TTL as passed to the cache store."""
        return self.caching_duration_days * 24 * 60 * 60


def create_config(
    settings: Optional[Mapping[str, Any]] = None,
    **overrides: Any,
) -> ClientConfig:
    """Validate raw settings and fill in defaults.

    Args:
        settings: Mapping of configuration values.
        **overrides: Values that take precedence over ``settings``.

    Returns:
        An immutable ClientConfig.

    Raises:
        ConfigError: Listing every invalid field, not just the first.
    """
    values: Dict[str, Any] = dict(settings or {})
    values.update(overrides)

    try:
        return ClientConfig(**values)
    except ValidationError as e:
        issues = [
            f"{'.'.join(str(part) for part in error['loc']) or 'config'}: {error['msg']}"
            for error in e.errors()
        ]
        raise ConfigError(
            f"Invalid client config: {'; '.join(issues)}",
            issues=issues,
        ) from e


@dataclass(frozen=True)
class Credentials:
    """API credentials and where they were read from."""

    username: str
    password: str
    source: str = "local"

    def __repr__(self) -> str:
        return f"Credentials(username={self.username!r}, password='****', source={self.source!r})"


def load_credentials(
    environ: Optional[Mapping[str, str]] = None,
    local: Optional[Mapping[str, str]] = None,
) -> Credentials:
    """Read credentials, preferring the environment over local storage.

    Args:
        environ: Environment mapping (defaults to ``os.environ``).
        local: Locally stored settings, e.g. a user preferences file.

    Returns:
        Credentials tagged with their source.

    Raises:
        ConfigError: If neither source has both values.
    """
    environ = os.environ if environ is None else environ

    username = environ.get(ENV_USERNAME)
    password = environ.get(ENV_PASSWORD)
    if username and password:
        return Credentials(username=username, password=password, source="environment")

    if local:
        username = local.get(LOCAL_USERNAME)
        password = local.get(LOCAL_PASSWORD)
        if username and password:
            return Credentials(username=username, password=password, source="local")

    raise ConfigError("No credentials available")
