"""HMAC-SHA1 request signing for OAuth 1.0a."""

import base64
import hashlib
import hmac
import secrets
import time
from urllib.parse import urlsplit, urlunsplit

from goauth.core.encoding import percent_encode
from goauth.core.params import Params, canonicalize


SIGNATURE_PARAM = "oauth_signature"


def generate_nonce() -> str:
    """Generate a single-use nonce (random unsigned 64-bit integer)."""
    return str(secrets.randbits(64))


def generate_timestamp() -> str:
    """Seconds since the Unix epoch."""
    return str(int(time.time()))


DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(url: str) -> str:
    """Reduce ``url`` to the base-string URI.

    Query and fragment are stripped, scheme and host lowercased, and the
    port dropped when it is the default one for the scheme.
    """
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    netloc = parts.netloc.lower()
    if parts.port is not None and DEFAULT_PORTS.get(scheme) == parts.port:
        netloc = netloc.rsplit(":", 1)[0]
    return urlunsplit((scheme, netloc, parts.path or "/", "", ""))


def signature_base_string(method: str, url: str, params: Params) -> str:
    """Assemble ``METHOD&encode(url)&encode(canonical params)``.

    Any ``oauth_signature`` already present is excluded, a signature is
    never part of its own input.
    """
    signable = {k: v for k, v in params.items() if k != SIGNATURE_PARAM}
    return "&".join(
        (
            method.upper(),
            percent_encode(normalize_url(url)),
            percent_encode(canonicalize(signable)),
        )
    )


def sign(
    method: str,
    url: str,
    params: Params,
    consumer_secret: str,
    token_secret: str | None = None,
) -> str:
    """Compute the base64 HMAC-SHA1 signature of a request.

    Args:
        method: HTTP method, always ``GET`` for the OAuth 1.0a flow
        url: Request URL; its query parameters must also be in ``params``
        params: Every parameter of the request except the signature
        consumer_secret: Consumer secret, ``anonymous`` for unregistered apps
        token_secret: Request or access token secret, if one exists yet

    Returns:
        Value for the ``oauth_signature`` parameter

    """
    key = f"{percent_encode(consumer_secret or '')}&{percent_encode(token_secret or '')}"
    base_string = signature_base_string(method, url, params)
    digest = hmac.new(
        key.encode("ascii"), base_string.encode("ascii"), hashlib.sha1
    ).digest()
    return base64.b64encode(digest).decode("ascii")
