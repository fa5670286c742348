"""Decoders for the three response shapes returned by Google's endpoints.

Which decoder applies is known from the endpoint being called; bodies are
never sniffed.
"""

import re

from goauth.core.encoding import percent_decode
from goauth.exceptions import MalformedResponseError
from goauth.models import ValidationReport


# "key": "value" or "key": 123 at any nesting level; not a JSON parser
TOKEN_FIELD_PATTERN = re.compile(
    r'"(?P<key>[a-z0-9_\-/ ]+)"\s*:\s*(?:"(?P<str>[a-z0-9_\-/ .]*)"|(?P<int>[0-9]+))',
    re.IGNORECASE,
)


def parse_query_string(body: str) -> dict[str, list[str]]:
    """Decode a urlencoded query string into a multi-valued mapping.

    Everything up to and including the last ``?`` is dropped. Each field is
    split on its first ``=``; a field without one maps to an empty value.
    Only values are percent-decoded, and repeated keys accumulate.

    Args:
        body: Response body or full URL

    Returns:
        Mapping of key to every value received for it, in order

    """
    if "?" in body:
        body = body[body.rindex("?") + 1 :]

    results: dict[str, list[str]] = {}
    for field in body.split("&"):
        if not field:
            continue
        key, sep, value = field.partition("=")
        results.setdefault(key, []).append(percent_decode(value) if sep else "")
    return results


def first_value(params: dict[str, list[str]], key: str) -> str:
    """First value recorded for ``key``, or an empty string."""
    values = params.get(key)
    return values[0] if values else ""


def parse_validation_report(body: str) -> ValidationReport:
    """Decode a newline-delimited ``Key=Value`` token-info report.

    Lines starting with ``Scope`` (any case) and containing ``=`` contribute
    the text after the first ``=`` as a granted scope. A line starting with
    ``Secure=true`` (any case) marks the token as secure. Anything else is
    ignored.

    Raises:
        MalformedResponseError: If the body is empty

    """
    if not body or not body.strip():
        raise MalformedResponseError(
            "Empty token validation response", response_text=body
        )

    scopes: list[str] = []
    secure = False
    for line in body.splitlines():
        lowered = line.lower()
        if lowered.startswith("scope") and "=" in line:
            scope = line.split("=", 1)[1].strip()
            if scope:
                scopes.append(scope)
        elif lowered.startswith("secure=true"):
            secure = True

    return ValidationReport(scopes=scopes, secure=secure, raw=body)


def parse_token_fields(text: str) -> dict[str, str]:
    """Extract flat ``"key": value`` scalars from a JSON-shaped body.

    Only quoted strings from a restricted character set and bare integers
    are recognized. Keys are lowercased and later occurrences win.

    Raises:
        MalformedResponseError: If no field matched at all

    """
    fields: dict[str, str] = {}
    for match in TOKEN_FIELD_PATTERN.finditer(text or ""):
        value = match.group("str")
        if value is None:
            value = match.group("int")
        fields[match.group("key").lower()] = value

    if not fields:
        raise MalformedResponseError(
            "No token fields found in response", response_text=text
        )
    return fields
