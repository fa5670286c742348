"""Tests for OAuth 1.0a HMAC-SHA1 signing."""

import time

import pytest

from goauth.core.signing import (
    generate_nonce,
    generate_timestamp,
    normalize_url,
    sign,
    signature_base_string,
)


# OAuth Core 1.0 appendix A.5 example request
PHOTOS_URL = "http://photos.example.net/photos"
PHOTOS_PARAMS = {
    "file": "vacation.jpg",
    "size": "original",
    "oauth_consumer_key": "dpf43f3p2l4k3l03",
    "oauth_token": "nnch734d00sl2jdk",
    "oauth_signature_method": "HMAC-SHA1",
    "oauth_timestamp": "1191242096",
    "oauth_nonce": "kllo9940pd9333jh",
    "oauth_version": "1.0",
}
PHOTOS_CONSUMER_SECRET = "kd94hf93k423kf44"
PHOTOS_TOKEN_SECRET = "pfkkdhi9sl3r4s00"


class TestSignatureBaseString:
    """Tests for signature_base_string."""

    def test_matches_reference_example(self) -> None:
        assert signature_base_string("GET", PHOTOS_URL, PHOTOS_PARAMS) == (
            "GET&http%3A%2F%2Fphotos.example.net%2Fphotos&"
            "file%3Dvacation.jpg%26oauth_consumer_key%3Ddpf43f3p2l4k3l03"
            "%26oauth_nonce%3Dkllo9940pd9333jh%26oauth_signature_method%3DHMAC-SHA1"
            "%26oauth_timestamp%3D1191242096%26oauth_token%3Dnnch734d00sl2jdk"
            "%26oauth_version%3D1.0%26size%3Doriginal"
        )

    def test_excludes_existing_signature(self) -> None:
        with_signature = {**PHOTOS_PARAMS, "oauth_signature": "stale"}
        assert signature_base_string(
            "GET", PHOTOS_URL, with_signature
        ) == signature_base_string("GET", PHOTOS_URL, PHOTOS_PARAMS)

    def test_method_is_uppercased(self) -> None:
        assert signature_base_string("get", PHOTOS_URL, {}).startswith("GET&")

    def test_empty_params_leave_empty_third_component(self) -> None:
        assert signature_base_string("GET", "https://x.test/a", {}) == (
            "GET&https%3A%2F%2Fx.test%2Fa&"
        )


class TestNormalizeUrl:
    """Tests for normalize_url."""

    def test_drops_query_and_fragment(self) -> None:
        assert normalize_url("https://x.test/a?b=1#frag") == "https://x.test/a"

    def test_lowercases_scheme_and_host(self) -> None:
        assert normalize_url("HTTPS://WWW.Google.com/Accounts") == (
            "https://www.google.com/Accounts"
        )

    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("https://x.test:443/a", "https://x.test/a"),
            ("http://x.test:80/a", "http://x.test/a"),
            ("HTTP://X.test:80/a", "http://x.test/a"),
        ],
    )
    def test_drops_default_port(self, url: str, expected: str) -> None:
        assert normalize_url(url) == expected

    def test_keeps_non_default_port(self) -> None:
        assert normalize_url("https://x.test:8443/a") == "https://x.test:8443/a"
        assert normalize_url("http://x.test:443/a") == "http://x.test:443/a"

    def test_default_port_signs_like_bare_host(self) -> None:
        params = {"oauth_nonce": "1", "oauth_timestamp": "2"}
        assert sign("GET", "https://x.test:443/a", params, "cs", "ts") == sign(
            "GET", "https://x.test/a", params, "cs", "ts"
        )



class TestSign:
    """Tests for sign."""

    def test_matches_reference_signature(self) -> None:
        signature = sign(
            "GET",
            PHOTOS_URL,
            PHOTOS_PARAMS,
            PHOTOS_CONSUMER_SECRET,
            PHOTOS_TOKEN_SECRET,
        )
        assert signature == "tR3+Ty81lMeYAr/Fid0kMTYa/WM="

    def test_is_deterministic(self) -> None:
        first = sign("GET", PHOTOS_URL, PHOTOS_PARAMS, "secret", "token-secret")
        second = sign("GET", PHOTOS_URL, dict(PHOTOS_PARAMS), "secret", "token-secret")
        assert first == second

    def test_insertion_order_does_not_matter(self) -> None:
        reversed_params = dict(reversed(list(PHOTOS_PARAMS.items())))
        assert sign("GET", PHOTOS_URL, reversed_params, "s") == sign(
            "GET", PHOTOS_URL, PHOTOS_PARAMS, "s"
        )

    def test_changing_any_value_changes_signature(self) -> None:
        baseline = sign("GET", PHOTOS_URL, PHOTOS_PARAMS, "s", "t")
        for key in PHOTOS_PARAMS:
            changed = {**PHOTOS_PARAMS, key: PHOTOS_PARAMS[key] + "x"}
            assert sign("GET", PHOTOS_URL, changed, "s", "t") != baseline, key

    def test_token_secret_is_part_of_the_key(self) -> None:
        assert sign("GET", PHOTOS_URL, PHOTOS_PARAMS, "s", None) == sign(
            "GET", PHOTOS_URL, PHOTOS_PARAMS, "s", ""
        )
        assert sign("GET", PHOTOS_URL, PHOTOS_PARAMS, "s", "t") != sign(
            "GET", PHOTOS_URL, PHOTOS_PARAMS, "s", None
        )

    def test_signature_is_base64_of_sha1_digest(self) -> None:
        signature = sign("GET", PHOTOS_URL, PHOTOS_PARAMS, "anonymous")
        # 20 digest bytes -> 28 base64 characters with one pad
        assert len(signature) == 28
        assert signature.endswith("=")


class TestNonceAndTimestamp:
    """Tests for per-request nonce and timestamp generation."""

    def test_nonces_are_not_reused(self) -> None:
        nonces = {generate_nonce() for _ in range(50)}
        assert len(nonces) == 50

    def test_nonce_is_unsigned_64_bit_integer(self) -> None:
        value = int(generate_nonce())
        assert 0 <= value < 2**64

    def test_timestamp_is_current_epoch_seconds(self) -> None:
        assert abs(int(generate_timestamp()) - time.time()) < 5
