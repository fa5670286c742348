"""Protocol primitives: encoding, canonicalization, signing and decoding."""

from goauth.core.encoding import percent_decode, percent_encode
from goauth.core.params import build_authorization_header, build_url, canonicalize
from goauth.core.responses import (
    first_value,
    parse_query_string,
    parse_token_fields,
    parse_validation_report,
)
from goauth.core.signing import (
    generate_nonce,
    generate_timestamp,
    sign,
    signature_base_string,
)


__all__ = [
    # Encoding
    "percent_encode",
    "percent_decode",
    # Parameters
    "canonicalize",
    "build_url",
    "build_authorization_header",
    # Signing
    "sign",
    "signature_base_string",
    "generate_nonce",
    "generate_timestamp",
    # Responses
    "parse_query_string",
    "first_value",
    "parse_validation_report",
    "parse_token_fields",
]
