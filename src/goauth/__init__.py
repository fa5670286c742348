"""Client-side OAuth 1.0a and OAuth 2.0 credential acquisition for Google accounts."""

from goauth.config import OAuthSettings, configure_logging, get_settings
from goauth.exceptions import (
    ConfigurationError,
    ErrorType,
    GOAuthError,
    InvalidFlowStateError,
    MalformedResponseError,
    MissingTokenError,
    MissingVerifierError,
    NotSecureError,
    OAuthFlowError,
    ScopeMismatchError,
    TokenExchangeError,
    TransportFailureError,
)
from goauth.models import (
    ClientCredentials,
    ConsumerCredentials,
    OAuth1Token,
    OAuth2Token,
    ValidationReport,
)
from goauth.oauth1 import FlowStep, OAuth1Flow
from goauth.oauth2 import OAuth2Flow
from goauth.prompt import AuthorizationPrompt, BrowserPrompt, ConsolePrompt
from goauth.transport import HttpxTransport, Transport


__version__ = "0.1.0"

__all__ = [
    # Flows
    "OAuth1Flow",
    "OAuth2Flow",
    "FlowStep",
    # Collaborators
    "Transport",
    "HttpxTransport",
    "AuthorizationPrompt",
    "BrowserPrompt",
    "ConsolePrompt",
    # Models
    "ConsumerCredentials",
    "ClientCredentials",
    "OAuth1Token",
    "OAuth2Token",
    "ValidationReport",
    # Config
    "OAuthSettings",
    "get_settings",
    "configure_logging",
    # Exceptions
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
