"""OAuth constants shared by the OAuth 1.0a and OAuth 2.0 flows.

Endpoint Notes
==============
The OAuth 1.0a endpoints live under ``www.google.com/accounts``. Token
validation reuses the AuthSub token-info endpoint, which also accepts
OAuth-signed requests and answers with a newline-delimited report:

    Target=goauth
    Secure=true
    Scope=https://mail.google.com/

Unregistered Applications
=========================
Google accepts ``anonymous`` as both consumer key and consumer secret for
applications that were never registered. This applies to OAuth 1.0a only.

Out-of-band Callbacks
=====================
Without a callback URL the server shows the verifier (OAuth 1.0a) or the
authorization code (OAuth 2.0) on its own page, and the user copies it back.
"""

# OAuth 1.0a
OAUTH1_REQUEST_TOKEN_URL = "https://www.google.com/accounts/OAuthGetRequestToken"
OAUTH1_AUTHORIZE_TOKEN_URL = "https://www.google.com/accounts/OAuthAuthorizeToken"
OAUTH1_ACCESS_TOKEN_URL = "https://www.google.com/accounts/OAuthGetAccessToken"
OAUTH1_VALIDATE_TOKEN_URL = "https://www.google.com/accounts/AuthSubTokenInfo"

OAUTH1_SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH1_VERSION = "1.0"
OAUTH1_OOB_CALLBACK = "oob"
OAUTH1_MOBILE_TEMPLATE = "btmpl=mobile"

ANONYMOUS_CONSUMER = "anonymous"

# OAuth 2.0
OAUTH2_AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/auth"
OAUTH2_TOKEN_URL = "https://accounts.google.com/o/oauth2/token"
OAUTH2_OOB_REDIRECT_URI = "urn:ietf:wg:oauth:2.0:oob"

GRANT_AUTHORIZATION_CODE = "authorization_code"
GRANT_REFRESH_TOKEN = "refresh_token"

# HTTP
DEFAULT_USER_AGENT = "goauth/0.1"
DEFAULT_REQUEST_TIMEOUT = 30.0
