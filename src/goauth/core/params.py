"""Parameter canonicalization for signing and request construction."""

from collections.abc import Iterator, Mapping
from typing import Any
from urllib.parse import urlsplit

from goauth.core.encoding import percent_encode


# A value may be a list or tuple when the parameter repeats
Params = Mapping[str, Any]

# Only protocol parameters belong in the Authorization header
HEADER_PARAM_PREFIXES = ("oauth_", "xoauth_")


def _encoded_pairs(params: Params) -> Iterator[tuple[str, str]]:
    for key, value in params.items():
        values = value if isinstance(value, list | tuple) else (value,)
        for item in values:
            yield percent_encode(key), percent_encode(item)


def canonicalize(params: Params) -> str:
    """Join a parameter set into the ordered, encoded form used for signing.

    Pairs are sorted by encoded key, then by encoded value, using ordinal
    comparison regardless of insertion order. A list or tuple value emits
    one pair per element. An empty parameter set yields an empty string.

    Args:
        params: Parameter name to raw (unencoded) value or values

    Returns:
        ``key=value`` pairs joined with ``&``

    """
    return "&".join(f"{key}={value}" for key, value in sorted(_encoded_pairs(params)))


def build_url(base_url: str, params: Params) -> str:
    """Append the canonical query string to ``base_url``.

    Args:
        base_url: Endpoint URL, optionally carrying a query string already
        params: Parameters to append

    Returns:
        Full request URL without a dangling ``?`` or ``&``

    """
    query = canonicalize(params)
    if not query:
        return base_url
    separator = "&" if urlsplit(base_url).query else "?"
    return f"{base_url}{separator}{query}"


def build_authorization_header(params: Params, realm: str | None = None) -> str:
    """Build the value of an ``Authorization: OAuth ...`` header.

    Args:
        params: Signed parameter set; only ``oauth_*``/``xoauth_*`` keys are used
        realm: Optional realm, emitted first and never encoded

    Returns:
        Header value such as ``OAuth oauth_consumer_key="k", oauth_nonce="n"``

    """
    parts = []
    if realm is not None:
        parts.append(f'realm="{realm}"')
    parts.extend(
        f'{percent_encode(key)}="{percent_encode(params[key])}"'
        for key in sorted(params)
        if key.startswith(HEADER_PARAM_PREFIXES)
    )
    return "OAuth " + ", ".join(parts)
