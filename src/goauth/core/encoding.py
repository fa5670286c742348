"""Percent-encoding restricted to the RFC 3986 unreserved set.

OAuth signatures are computed over encoded text, so every component that
touches the wire or a base string goes through ``percent_encode``. Text is
encoded as UTF-8 bytes, so characters outside ASCII become one ``%XX``
triplet per byte.
"""

from typing import Any
from urllib.parse import quote, unquote


def percent_encode(value: Any) -> str:
    """Encode every character outside the unreserved set as ``%XX``.

    Args:
        value: Text to encode; non-string values are converted with ``str()``

    Returns:
        Encoded text using uppercase hex digits

    """
    if value is None:
        return ""
    if not isinstance(value, str):
        value = str(value)
    return quote(value, safe="", encoding="utf-8", errors="strict")


def percent_decode(value: str) -> str:
    """Replace every ``%XX`` triplet with the character it encodes.

    Malformed sequences are left as literal text and ``+`` is not treated
    as a space.
    """
    if not value or "%" not in value:
        return value
    return unquote(value, encoding="utf-8", errors="replace")
