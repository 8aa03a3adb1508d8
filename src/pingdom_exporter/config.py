"""
Exporter Settings

Validated runtime configuration assembled from command-line arguments,
with environment variable fallbacks for the options operators usually
set per deployment:

    PINGDOM_API_URL               API root (default: Pingdom API 2.0)
    PINGDOM_EXPORTER_LOG_LEVEL    DEBUG, INFO, WARNING, ERROR, CRITICAL
    PINGDOM_EXPORTER_LOG_FORMAT   text or json
"""

import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

from pingdom_exporter.client import DEFAULT_BASE_URL
from pingdom_exporter.errors import ConfigurationError
from pingdom_exporter.logging_config import LOG_FORMATS

ENV_API_URL = "PINGDOM_API_URL"
ENV_LOG_LEVEL = "PINGDOM_EXPORTER_LOG_LEVEL"
ENV_LOG_FORMAT = "PINGDOM_EXPORTER_LOG_FORMAT"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Read an environment variable, treating empty strings as unset."""
    value = os.environ.get(name)
    return value if value else default


def mask_secret(value: str, visible_chars: int = 4) -> str:
    """
    Mask a secret value for safe logging.

    Returns:
        Masked string like "****abcd"
    """
    if not value:
        return ""
    if len(value) <= visible_chars:
        return "*" * len(value)
    return "*" * (len(value) - visible_chars) + value[-visible_chars:]


class ExporterSettings(BaseModel):
    """Everything the server subcommand needs to run."""

    model_config = ConfigDict(validate_default=True)

    username: str = Field(..., min_length=1)
    password: SecretStr
    api_key: SecretStr
    account_email: Optional[str] = None

    wait: int = Field(10, ge=1, description="Seconds between Pingdom API calls")
    port: int = Field(8000, ge=1, le=65535)
    host: str = "0.0.0.0"
    base_url: str = Field(default_factory=lambda: get_env(ENV_API_URL, DEFAULT_BASE_URL))
    timeout: Optional[float] = Field(None, gt=0, description="Pingdom request timeout in seconds")

    log_level: str = Field(default_factory=lambda: get_env(ENV_LOG_LEVEL, "INFO"))
    log_format: str = Field(default_factory=lambda: get_env(ENV_LOG_FORMAT, "text"))

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in LOG_FORMATS:
            raise ValueError(f"log format must be one of {', '.join(LOG_FORMATS)}")
        return v

    @property
    def multi_account(self) -> bool:
        return self.account_email is not None

    @classmethod
    def load(cls, **values: Any) -> "ExporterSettings":
        """
        Build settings, dropping None values so defaults and env fallbacks apply.

        Raises:
            ConfigurationError: If any value fails validation
        """
        values = {k: v for k, v in values.items() if v is not None}
        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(
                f"Invalid configuration: {problems}",
                context={"fields": [err["loc"] for err in e.errors()]},
            ) from e

    def describe(self) -> Dict[str, Any]:
        """Settings summary safe to log."""
        return {
            "username": self.username,
            "password": mask_secret(self.password.get_secret_value()),
            "api_key": mask_secret(self.api_key.get_secret_value()),
            "account_email": self.account_email,
            "mode": "multi-account" if self.multi_account else "single-account",
            "wait": self.wait,
            "host": self.host,
            "port": self.port,
            "base_url": self.base_url,
            "timeout": self.timeout,
        }
