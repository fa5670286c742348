"""Data models for credentials, tokens and validation reports."""

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from goauth.constants import ANONYMOUS_CONSUMER


class ConsumerCredentials(BaseModel):
    """OAuth 1.0a consumer key and secret.

    Empty halves fall back to ``anonymous``, which Google accepts for
    unregistered applications.
    """

    model_config = ConfigDict(frozen=True)

    consumer_key: str = ANONYMOUS_CONSUMER
    consumer_secret: str = ANONYMOUS_CONSUMER

    @field_validator("consumer_key", "consumer_secret", mode="before")
    @classmethod
    def default_to_anonymous(cls, v: str | None) -> str:
        return v or ANONYMOUS_CONSUMER


class ClientCredentials(BaseModel):
    """OAuth 2.0 client id and secret."""

    model_config = ConfigDict(frozen=True)

    client_id: str
    client_secret: str = ""

    @field_validator("client_secret", mode="before")
    @classmethod
    def none_to_empty(cls, v: str | None) -> str:
        return v or ""


class OAuth1Token(BaseModel):
    """OAuth 1.0a token pair (request token or access token)."""

    model_config = ConfigDict(frozen=True)

    token: str = ""
    token_secret: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.token or not self.token_secret


class OAuth2Token(BaseModel):
    """OAuth 2.0 access token with its refresh token and expiry."""

    model_config = ConfigDict(frozen=True)

    access_token: str = ""
    refresh_token: str = ""
    expires_at: datetime | None = None

    @property
    def is_expired(self) -> bool:
        """True when no expiry is known or it has passed."""
        if self.expires_at is None:
            return True
        return datetime.now(UTC) >= self.expires_at


class ValidationReport(BaseModel):
    """Decoded token-info report."""

    model_config = ConfigDict(frozen=True)

    scopes: list[str] = Field(default_factory=list)
    secure: bool = False
    raw: str = Field(default="", repr=False)

    def missing_scopes(self, requested: list[str]) -> list[str]:
        """Requested scopes absent from the granted set, compared case-insensitively."""
        granted = {scope.casefold() for scope in self.scopes}
        return [scope for scope in requested if scope.casefold() not in granted]
