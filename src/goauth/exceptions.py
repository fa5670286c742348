"""Consolidated exception hierarchy for goauth.

Every flow step either completes or raises one of these. The diagnostic
text (normally the raw server response body) travels on the exception as
``response_text`` and is mirrored into the engine's ``last_error``.
Error types use StrEnum for type safety and autocompletion.
"""

from enum import StrEnum
from typing import Any


class ErrorType(StrEnum):
    """Error type codes attached to every goauth exception."""

    TRANSPORT_FAILURE = "transport_failure"
    MISSING_TOKEN = "missing_token"
    MISSING_VERIFIER = "missing_verifier"
    SCOPE_MISMATCH = "scope_mismatch"
    NOT_SECURE = "not_secure"
    MALFORMED_RESPONSE = "malformed_response"
    INVALID_FLOW_STATE = "invalid_flow_state"
    TOKEN_EXCHANGE = "token_exchange"
    CONFIGURATION = "configuration"


# ============================================================================
# Base Exceptions
# ============================================================================


class GOAuthError(Exception):
    """Base exception for all goauth errors.

    All exceptions inherit from this base class for easy catching.
    """

    error_type: ErrorType = ErrorType.TRANSPORT_FAILURE

    def __init__(
        self,
        message: str,
        *,
        response_text: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.response_text = response_text
        self.details = details or {}

    @property
    def diagnostic(self) -> str:
        """Text recorded as the engine's last error."""
        if self.response_text:
            return self.response_text
        return self.message


class ConfigurationError(GOAuthError):
    """Raised when settings cannot be loaded or validated."""

    error_type = ErrorType.CONFIGURATION


# ============================================================================
# Response & Transport Errors
# ============================================================================


class TransportFailureError(GOAuthError):
    """The transport returned an empty or unreadable body.

    At this layer a refused connection and a denied request look the same.
    """

    error_type = ErrorType.TRANSPORT_FAILURE

    def __init__(self, message: str = "Empty response from server", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class MalformedResponseError(GOAuthError):
    """Decoding the response produced no usable fields."""

    error_type = ErrorType.MALFORMED_RESPONSE


# ============================================================================
# Flow Errors
# ============================================================================


class OAuthFlowError(GOAuthError):
    """Base error for authorization flow steps."""

    pass


class MissingTokenError(OAuthFlowError):
    """A required token field was absent after decoding the response."""

    error_type = ErrorType.MISSING_TOKEN


class MissingVerifierError(OAuthFlowError):
    """The caller omitted the verifier returned by user authorization."""

    error_type = ErrorType.MISSING_VERIFIER

    def __init__(self, message: str = "Missing Verifier!") -> None:
        super().__init__(message)


class InvalidFlowStateError(OAuthFlowError):
    """A step was invoked before the step it depends on completed."""

    error_type = ErrorType.INVALID_FLOW_STATE


class ScopeMismatchError(OAuthFlowError):
    """Token validation did not report every requested scope as granted."""

    error_type = ErrorType.SCOPE_MISMATCH

    def __init__(
        self,
        missing_scopes: list[str],
        *,
        response_text: str | None = None,
    ) -> None:
        message = "Missing Scopes:\n" + "\n".join(missing_scopes)
        super().__init__(
            message,
            response_text=response_text,
            details={"missing_scopes": missing_scopes},
        )
        self.missing_scopes = missing_scopes

    @property
    def diagnostic(self) -> str:
        return self.message


class NotSecureError(OAuthFlowError):
    """Token validation report lacks the ``Secure=true`` line."""

    error_type = ErrorType.NOT_SECURE

    def __init__(self, response_text: str) -> None:
        super().__init__(f"Not Secured: {response_text}", response_text=response_text)

    @property
    def diagnostic(self) -> str:
        return self.message


class TokenExchangeError(OAuthFlowError):
    """OAuth 2.0 code exchange or refresh failed."""

    error_type = ErrorType.TOKEN_EXCHANGE


__all__ = [
    "ErrorType",
    "GOAuthError",
    "ConfigurationError",
    "TransportFailureError",
    "MalformedResponseError",
    "OAuthFlowError",
    "MissingTokenError",
    "MissingVerifierError",
    "InvalidFlowStateError",
    "ScopeMismatchError",
    "NotSecureError",
    "TokenExchangeError",
]
