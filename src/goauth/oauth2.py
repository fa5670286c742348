"""OAuth 2.0 authorization-code and refresh-token flows against Google."""

from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import NoReturn

from structlog import get_logger

from goauth.config import OAuthSettings, get_settings
from goauth.constants import (
    GRANT_AUTHORIZATION_CODE,
    GRANT_REFRESH_TOKEN,
    OAUTH2_OOB_REDIRECT_URI,
)
from goauth.core.params import build_url
from goauth.core.responses import parse_token_fields
from goauth.exceptions import (
    GOAuthError,
    MalformedResponseError,
    MissingTokenError,
    TokenExchangeError,
    TransportFailureError,
)
from goauth.models import ClientCredentials, OAuth2Token
from goauth.transport import HttpxTransport, Transport


logger = get_logger(__name__)


class OAuth2Flow:
    """Exchanges authorization codes and refresh tokens for access tokens.

    The only state kept between calls is the current token. Unlike OAuth
    1.0a nothing is signed; the client secret travels in the POST body.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str | None = None,
        redirect_url: str | None = None,
        scopes: Iterable[str] = (),
        *,
        transport: Transport | None = None,
        settings: OAuthSettings | None = None,
    ):
        """Initialize the flow.

        Args:
            client_id: Registered client id
            client_secret: Registered client secret
            redirect_url: Redirect target, the out-of-band URN when empty
            scopes: Scope URIs to request
            transport: HTTP transport, a new ``HttpxTransport`` by default
            settings: Endpoint settings, process-wide settings by default

        """
        self.settings = settings or get_settings()
        self._credentials = ClientCredentials(
            client_id=client_id, client_secret=client_secret
        )
        self._redirect_url = redirect_url or ""
        self._scopes = list(scopes)
        self._transport = transport or HttpxTransport(self.settings)

        self._token = OAuth2Token()
        self._last_error = ""

    @property
    def client_id(self) -> str:
        return self._credentials.client_id

    @property
    def client_secret(self) -> str:
        return self._credentials.client_secret

    @property
    def redirect_url(self) -> str:
        return self._redirect_url

    @property
    def redirect_uri(self) -> str:
        """Redirect target actually sent to the server."""
        return self._redirect_url or OAUTH2_OOB_REDIRECT_URI

    @property
    def scopes(self) -> list[str]:
        return list(self._scopes)

    @property
    def token(self) -> str:
        return self._token.access_token

    @property
    def refresh_token(self) -> str:
        return self._token.refresh_token

    @refresh_token.setter
    def refresh_token(self, value: str) -> None:
        # Lets a stored refresh token be reused in a new instance
        self._token = self._token.model_copy(update={"refresh_token": value or ""})

    @property
    def expires(self) -> datetime | None:
        return self._token.expires_at

    @property
    def current_token(self) -> OAuth2Token:
        return self._token

    @property
    def last_error(self) -> str:
        return self._last_error

    def reset(self) -> None:
        """Forget the current token and last error."""
        self._token = OAuth2Token()
        self._last_error = ""

    def get_auth_url(self) -> str:
        """Build the URL the user visits to grant access."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self._scopes),
        }
        return build_url(self.settings.oauth2_authorize_url, params)

    def exchange_code(self, code: str) -> OAuth2Token:
        """Exchange an authorization code for access and refresh tokens.

        Raises:
            MissingTokenError: If ``code`` is empty
            TokenExchangeError: If the response lacks a usable token

        """
        if not code:
            self._fail(MissingTokenError("Missing authorization code"))

        return self._request_token(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "redirect_uri": self.redirect_uri,
                "grant_type": GRANT_AUTHORIZATION_CODE,
            },
            operation="token_exchange",
        )

    def refresh(self) -> OAuth2Token:
        """Obtain a new access token with the current refresh token.

        Raises:
            MissingTokenError: If no refresh token is known
            TokenExchangeError: If the response lacks a usable token

        """
        if not self._token.refresh_token:
            self._fail(MissingTokenError("No refresh token available"))

        return self._request_token(
            {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
                "refresh_token": self._token.refresh_token,
                "grant_type": GRANT_REFRESH_TOKEN,
            },
            operation="token_refresh",
        )

    def try_exchange_code(self, code: str) -> tuple[bool, GOAuthError | None]:
        """Like ``exchange_code`` but returns ``(ok, error)`` instead of raising."""
        try:
            self.exchange_code(code)
        except GOAuthError as e:
            return False, e
        return True, None

    def try_refresh(self) -> tuple[bool, GOAuthError | None]:
        """Like ``refresh`` but returns ``(ok, error)`` instead of raising."""
        try:
            self.refresh()
        except GOAuthError as e:
            return False, e
        return True, None

    def _request_token(self, data: dict[str, str], operation: str) -> OAuth2Token:
        body = self._transport.post_form(self.settings.oauth2_token_url, data)
        if not body.strip():
            self._fail(TransportFailureError(response_text=body))

        try:
            fields = parse_token_fields(body)
        except MalformedResponseError as e:
            self._fail(
                TokenExchangeError(
                    f"Failed to get access token ({operation}): {e.message}",
                    response_text=body,
                )
            )

        try:
            expires_in = int(fields.get("expires_in", "0"))
        except ValueError:
            expires_in = 0

        token = OAuth2Token(
            access_token=fields.get("access_token", ""),
            # Refresh responses usually omit the refresh token
            refresh_token=fields.get("refresh_token") or self._token.refresh_token,
            expires_at=datetime.now(UTC) + timedelta(seconds=expires_in)
            if expires_in > 0
            else None,
        )
        if not token.access_token or not token.refresh_token or token.expires_at is None:
            self._fail(
                TokenExchangeError(
                    f"Failed to get access token ({operation}). Check response_text for details.",
                    response_text=body,
                    details={
                        "has_access_token": bool(token.access_token),
                        "has_refresh_token": bool(token.refresh_token),
                        "expires_in": expires_in,
                    },
                )
            )

        self._token = token
        logger.info(
            f"oauth2_{operation}_completed",
            client_id=self.client_id,
            expires_at=token.expires_at.isoformat(),
        )
        return token

    def _fail(self, error: GOAuthError) -> NoReturn:
        self._last_error = error.diagnostic
        logger.warning(
            "oauth2_request_failed",
            error_type=error.error_type,
            error=error.message,
        )
        raise error
