"""Three-legged OAuth 1.0a flow against Google accounts.

Example:
    flow = OAuth1Flow(
        "my-app",
        "My Application",
        scopes=["https://www.google.com/m8/feeds/"],
        prompt=BrowserPrompt(),
    )
    flow.authorize()                       # steps 1 and 2
    flow.get_access_token(input("Code: ")) # step 3
    flow.validate_tokens(flow.token, flow.token_secret)
"""

from collections.abc import Iterable, Mapping
from enum import StrEnum
from typing import Any, NoReturn
from urllib.parse import urlsplit, urlunsplit

from structlog import get_logger

from goauth.config import OAuthSettings, get_settings
from goauth.constants import (
    OAUTH1_MOBILE_TEMPLATE,
    OAUTH1_OOB_CALLBACK,
    OAUTH1_SIGNATURE_METHOD,
    OAUTH1_VERSION,
)
from goauth.core.encoding import percent_decode, percent_encode
from goauth.core.params import build_authorization_header, build_url
from goauth.core.responses import (
    first_value,
    parse_query_string,
    parse_validation_report,
)
from goauth.core.signing import (
    SIGNATURE_PARAM,
    generate_nonce,
    generate_timestamp,
    sign,
)
from goauth.exceptions import (
    GOAuthError,
    InvalidFlowStateError,
    MissingTokenError,
    MissingVerifierError,
    NotSecureError,
    ScopeMismatchError,
    TransportFailureError,
)
from goauth.models import ConsumerCredentials, OAuth1Token, ValidationReport
from goauth.prompt import AuthorizationPrompt
from goauth.transport import HttpxTransport, Transport


logger = get_logger(__name__)

# Every OAuth 1.0a request in this flow is a signed GET
SIGNING_METHOD = "GET"


class FlowStep(StrEnum):
    """Steps of the three-legged flow, in the only order they may occur."""

    GET_REQUEST_TOKEN = "get_request_token"
    AUTHORIZE_TOKEN = "authorize_token"
    GET_ACCESS_TOKEN = "get_access_token"
    VALIDATE_TOKENS = "validate_tokens"

    @property
    def order(self) -> int:
        return list(FlowStep).index(self)


class OAuth1Flow:
    """Drives request token → user authorization → access token.

    One instance serves one authorization attempt. Steps run synchronously,
    each making at most one network round trip. A failing step raises a
    ``GOAuthError`` subclass, records its diagnostic in ``last_error`` and
    leaves the token pair and step untouched.
    """

    def __init__(
        self,
        app_name: str,
        display_name: str,
        mobile: bool = False,
        consumer_key: str | None = None,
        consumer_secret: str | None = None,
        callback_url: str | None = None,
        scopes: Iterable[str] = (),
        *,
        transport: Transport | None = None,
        prompt: AuthorizationPrompt | None = None,
        settings: OAuthSettings | None = None,
    ):
        """Initialize the flow.

        Args:
            app_name: Application name, informational only
            display_name: Name Google shows on the consent page
            mobile: Ask Google for the mobile authorization page
            consumer_key: Consumer key, ``anonymous`` when empty
            consumer_secret: Consumer secret, ``anonymous`` when empty
            callback_url: Where Google redirects after consent, ``oob`` when empty
            scopes: Scope URIs to request
            transport: HTTP transport, a new ``HttpxTransport`` by default
            prompt: Notified with the authorization URL in step 2
            settings: Endpoint settings, process-wide settings by default

        """
        self.settings = settings or get_settings()
        self._credentials = ConsumerCredentials(
            consumer_key=consumer_key, consumer_secret=consumer_secret
        )
        self._app_name = app_name
        self._display_name = display_name
        self._mobile = mobile
        self._callback_url = callback_url or OAUTH1_OOB_CALLBACK
        self._scopes = tuple(scopes)
        self._transport = transport or HttpxTransport(self.settings)
        self._prompt = prompt

        self._token = OAuth1Token()
        self._step = FlowStep.GET_REQUEST_TOKEN
        self._last_error = ""

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def app_name(self) -> str:
        return self._app_name

    @property
    def display_name(self) -> str:
        return self._display_name

    @property
    def mobile(self) -> bool:
        return self._mobile

    @property
    def callback_url(self) -> str:
        return self._callback_url

    @property
    def consumer_key(self) -> str:
        return self._credentials.consumer_key

    @property
    def consumer_secret(self) -> str:
        return self._credentials.consumer_secret

    @property
    def scopes(self) -> tuple[str, ...]:
        return self._scopes

    @property
    def token(self) -> str:
        return self._token.token

    @property
    def token_secret(self) -> str:
        return self._token.token_secret

    @property
    def token_pair(self) -> OAuth1Token:
        return self._token

    @property
    def step(self) -> FlowStep:
        return self._step

    @property
    def last_error(self) -> str:
        """Diagnostic of the most recent failed step; never cleared on success."""
        return self._last_error

    def reset(self) -> None:
        """Forget tokens and progress so the instance can start over."""
        self._token = OAuth1Token()
        self._step = FlowStep.GET_REQUEST_TOKEN
        self._last_error = ""

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def authorize(self) -> str:
        """Run steps 1 and 2: obtain a request token and prompt the user.

        Returns:
            The authorization URL handed to the prompt

        """
        self.get_request_token()
        return self.authorize_token()

    def get_request_token(self) -> OAuth1Token:
        """Step 1: obtain an unauthorized request token.

        Raises:
            InvalidFlowStateError: If the flow is past this step
            TransportFailureError: If the server returned nothing
            MissingTokenError: If the response lacks the token or its secret

        """
        if self._step is not FlowStep.GET_REQUEST_TOKEN:
            self._fail(
                InvalidFlowStateError(
                    f"Request token already obtained (step: {self._step}); call reset() first"
                )
            )

        params = self._oauth_params()
        params["oauth_callback"] = self._callback_url
        params["scope"] = " ".join(self._scopes)
        params["xoauth_displayname"] = self._display_name

        url = self.settings.request_token_url
        body = self._get(url, self._signed(url, params, token_secret=None))
        token = self._parse_token_response(body, "request token")

        self._token = token
        self._advance(FlowStep.AUTHORIZE_TOKEN)
        logger.info("oauth1_request_token_obtained", consumer_key=self.consumer_key)
        return token

    def authorize_token(self) -> str:
        """Step 2: build the consent URL and hand it to the prompt.

        No request is made; the user completes this step in a browser.

        Raises:
            InvalidFlowStateError: If no request token has been obtained

        """
        if self._step is not FlowStep.AUTHORIZE_TOKEN or not self._token.token:
            self._fail(
                InvalidFlowStateError(
                    f"No request token to authorize (step: {self._step})"
                )
            )

        url = f"{self.settings.authorize_token_url}?oauth_token={percent_encode(self._token.token)}"
        if self._mobile:
            url += f"&{OAUTH1_MOBILE_TEMPLATE}"

        logger.info("oauth1_user_authorization_required", mobile=self._mobile)
        if self._prompt is not None:
            self._prompt(url)
        return url

    def get_access_token(self, verifier: str) -> OAuth1Token:
        """Step 3: exchange the authorized request token for an access token.

        Args:
            verifier: Code shown to the user after granting access

        Raises:
            MissingVerifierError: If ``verifier`` is empty
            InvalidFlowStateError: If no request token is waiting for exchange
            TransportFailureError: If the server returned nothing
            MissingTokenError: If the response lacks the token or its secret

        """
        if not verifier:
            self._fail(MissingVerifierError())
        if self._step is not FlowStep.AUTHORIZE_TOKEN or self._token.is_empty:
            self._fail(
                InvalidFlowStateError(
                    f"No authorized request token to exchange (step: {self._step})"
                )
            )

        params = self._oauth_params()
        params["oauth_token"] = self._token.token
        params["oauth_verifier"] = verifier

        url = self.settings.access_token_url
        body = self._get(
            url, self._signed(url, params, token_secret=self._token.token_secret)
        )
        token = self._parse_token_response(body, "access token")

        self._token = token
        self._advance(FlowStep.GET_ACCESS_TOKEN)
        logger.info("oauth1_access_token_obtained", consumer_key=self.consumer_key)
        return token

    def validate_tokens(self, token: str, token_secret: str) -> ValidationReport:
        """Step 4: check that a token pair is live and covers every requested scope.

        Any token pair may be validated, not only this flow's own.

        Raises:
            TransportFailureError: If the server returned nothing
            ScopeMismatchError: If a requested scope was not granted
            NotSecureError: If the report lacks ``Secure=true``

        """
        params = self._oauth_params()
        params["oauth_token"] = token

        url = self.settings.validate_token_url
        body = self._get(url, self._signed(url, params, token_secret=token_secret))
        if not body.strip():
            self._fail(TransportFailureError(response_text=body))

        try:
            report = parse_validation_report(body)
        except GOAuthError as e:
            self._fail(e)

        missing = report.missing_scopes(list(self._scopes))
        if missing:
            self._fail(ScopeMismatchError(missing, response_text=body))
        if not report.secure:
            self._fail(NotSecureError(body))

        if token == self._token.token and self._step is FlowStep.GET_ACCESS_TOKEN:
            self._advance(FlowStep.VALIDATE_TOKENS)
        logger.info("oauth1_tokens_validated", granted_scopes=len(report.scopes))
        return report

    def fetch_resource(
        self,
        url: str,
        params: Mapping[str, Any] | None = None,
        use_header: bool = True,
    ) -> str:
        """Sign and GET a protected resource with the current token pair.

        Query parameters already in ``url``, repeated ones included, are
        signed along with ``params``.
        A missing token is not checked locally; the server rejects the call.

        Args:
            url: Resource URL
            params: Extra query parameters
            use_header: Send OAuth parameters in an ``Authorization`` header
                instead of the query string

        Returns:
            Response body, empty if the request failed outright

        """
        parts = urlsplit(url)
        base_url = urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
        # Keys come back still encoded; repeated keys keep every value
        resource_params: dict[str, Any] = {}
        for key, values in parse_query_string(parts.query).items():
            resource_params.setdefault(percent_decode(key), []).extend(values)
        resource_params.update(params or {})

        oauth_params = self._oauth_params()
        oauth_params["oauth_token"] = self._token.token
        signed = self._signed(
            base_url,
            {**resource_params, **oauth_params},
            token_secret=self._token.token_secret,
        )

        if use_header:
            header = build_authorization_header(signed)
            return self._transport.fetch(
                build_url(base_url, resource_params), headers={"Authorization": header}
            )
        return self._transport.fetch(build_url(base_url, signed))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _oauth_params(self) -> dict[str, Any]:
        # Fresh nonce and timestamp for every request
        return {
            "oauth_consumer_key": self.consumer_key,
            "oauth_nonce": generate_nonce(),
            "oauth_signature_method": OAUTH1_SIGNATURE_METHOD,
            "oauth_timestamp": generate_timestamp(),
            "oauth_version": OAUTH1_VERSION,
        }

    def _signed(
        self, url: str, params: dict[str, Any], token_secret: str | None
    ) -> dict[str, Any]:
        signature = sign(
            SIGNING_METHOD, url, params, self.consumer_secret, token_secret
        )
        return {**params, SIGNATURE_PARAM: signature}

    def _get(self, url: str, signed_params: Mapping[str, Any]) -> str:
        return self._transport.fetch(build_url(url, signed_params))

    def _parse_token_response(self, body: str, what: str) -> OAuth1Token:
        if not body.strip():
            self._fail(TransportFailureError(response_text=body))

        response = parse_query_string(body)
        token = OAuth1Token(
            token=first_value(response, "oauth_token"),
            token_secret=first_value(response, "oauth_token_secret"),
        )
        if token.is_empty:
            self._fail(
                MissingTokenError(
                    f"Failed to get {what}: oauth_token or oauth_token_secret missing",
                    response_text=body,
                )
            )
        return token

    def _advance(self, step: FlowStep) -> None:
        if step.order > self._step.order:
            self._step = step

    def _fail(self, error: GOAuthError) -> NoReturn:
        self._last_error = error.diagnostic
        logger.warning(
            "oauth1_step_failed",
            step=self._step,
            error_type=error.error_type,
            error=error.message,
        )
        raise error
