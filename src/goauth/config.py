"""Settings configuration for goauth flows."""

import logging
from functools import lru_cache

import structlog
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from goauth.constants import (
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_USER_AGENT,
    OAUTH1_ACCESS_TOKEN_URL,
    OAUTH1_AUTHORIZE_TOKEN_URL,
    OAUTH1_REQUEST_TOKEN_URL,
    OAUTH1_VALIDATE_TOKEN_URL,
    OAUTH2_AUTHORIZE_URL,
    OAUTH2_TOKEN_URL,
)
from goauth.exceptions import ConfigurationError


__all__ = [
    "OAuthSettings",
    "get_settings",
    "configure_logging",
]


class OAuthSettings(BaseSettings):
    """
    Endpoint, transport and logging settings for the OAuth flows.

    Values are read from ``GOAUTH_*`` environment variables and an optional
    ``.env`` file. Environment variables take precedence over .env values.
    """

    model_config = SettingsConfigDict(
        env_prefix="GOAUTH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OAuth 1.0a endpoints
    request_token_url: str = Field(
        default=OAUTH1_REQUEST_TOKEN_URL,
        description="OAuth 1.0a request-token endpoint",
    )
    authorize_token_url: str = Field(
        default=OAUTH1_AUTHORIZE_TOKEN_URL,
        description="OAuth 1.0a user authorization page",
    )
    access_token_url: str = Field(
        default=OAUTH1_ACCESS_TOKEN_URL,
        description="OAuth 1.0a access-token endpoint",
    )
    validate_token_url: str = Field(
        default=OAUTH1_VALIDATE_TOKEN_URL,
        description="Token-info endpoint used to validate OAuth 1.0a tokens",
    )

    # OAuth 2.0 endpoints
    oauth2_authorize_url: str = Field(
        default=OAUTH2_AUTHORIZE_URL,
        description="OAuth 2.0 authorization redirect endpoint",
    )
    oauth2_token_url: str = Field(
        default=OAUTH2_TOKEN_URL,
        description="OAuth 2.0 token endpoint",
    )

    # Transport
    request_timeout: float = Field(
        default=DEFAULT_REQUEST_TIMEOUT,
        gt=0,
        description="Connect/read timeout in seconds for every HTTP call",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header sent with every request",
    )

    # Logging
    verbose_errors: bool = Field(
        default=False,
        description="Log full response bodies instead of truncated previews",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level used by configure_logging",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown log level: {v}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> OAuthSettings:
    """Return the process-wide settings instance.

    Raises:
        ConfigurationError: If the environment holds invalid values
    """
    try:
        return OAuthSettings()
    except ValidationError as e:
        raise ConfigurationError(f"Failed to load configuration: {e}") from e


_logging_configured = False


def configure_logging(log_level: str | None = None) -> None:
    """Configure structlog once for console output."""
    global _logging_configured
    if _logging_configured:
        return

    level_name = (log_level or get_settings().log_level).upper()
    level = logging.getLevelNamesMapping().get(level_name, logging.INFO)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    _logging_configured = True
