"""Tests for settings loading."""

import pytest
import structlog
from pydantic import ValidationError

from goauth.config import OAuthSettings, configure_logging, get_settings
from goauth.constants import OAUTH1_REQUEST_TOKEN_URL, OAUTH2_TOKEN_URL
from goauth.exceptions import ConfigurationError


class TestOAuthSettings:
    """Tests for OAuthSettings."""

    @pytest.fixture(autouse=True)
    def clear_cache(self):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_defaults(self, settings) -> None:
        assert settings.request_token_url == OAUTH1_REQUEST_TOKEN_URL
        assert settings.oauth2_token_url == OAUTH2_TOKEN_URL
        assert settings.request_timeout == 30.0
        assert settings.verbose_errors is False

    def test_environment_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("GOAUTH_REQUEST_TIMEOUT", "5")
        monkeypatch.setenv("GOAUTH_OAUTH2_TOKEN_URL", "https://auth.test/token")
        monkeypatch.setenv("GOAUTH_VERBOSE_ERRORS", "true")

        settings = OAuthSettings(_env_file=None)

        assert settings.request_timeout == 5.0
        assert settings.oauth2_token_url == "https://auth.test/token"
        assert settings.verbose_errors is True

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            OAuthSettings(_env_file=None, request_timeout=0)

    def test_log_level_is_normalized(self) -> None:
        assert OAuthSettings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            OAuthSettings(_env_file=None, log_level="chatty")

    def test_get_settings_is_cached(self) -> None:
        assert get_settings() is get_settings()

    def test_get_settings_wraps_validation_errors(self, monkeypatch) -> None:
        monkeypatch.setenv("GOAUTH_REQUEST_TIMEOUT", "-1")

        with pytest.raises(ConfigurationError, match="Failed to load configuration"):
            get_settings()


class TestConfigureLogging:
    """Tests for configure_logging."""

    @pytest.fixture(autouse=True)
    def fresh_structlog(self, monkeypatch):
        monkeypatch.setattr("goauth.config._logging_configured", False)
        structlog.reset_defaults()
        yield
        structlog.reset_defaults()

    def test_configures_once(self) -> None:
        configure_logging("DEBUG")
        assert structlog.is_configured()

        wrapper_class = structlog.get_config()["wrapper_class"]
        configure_logging("ERROR")
        assert structlog.get_config()["wrapper_class"] is wrapper_class
