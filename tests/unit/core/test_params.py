"""Tests for parameter canonicalization and request builders."""

from goauth.core.params import build_authorization_header, build_url, canonicalize


class TestCanonicalize:
    """Tests for canonicalize."""

    def test_sorts_by_key_regardless_of_insertion_order(self) -> None:
        assert canonicalize({"b": "2", "a": "1"}) == "a=1&b=2"
        assert canonicalize({"a": "1", "b": "2"}) == "a=1&b=2"

    def test_uses_ordinal_comparison(self) -> None:
        # Uppercase sorts before lowercase, "_" sorts between them
        assert canonicalize({"b": "1", "B": "2", "_": "3"}) == "B=2&_=3&b=1"

    def test_encodes_values(self) -> None:
        assert (
            canonicalize({"scope": "https://a.example/ https://b.example/"})
            == "scope=https%3A%2F%2Fa.example%2F%20https%3A%2F%2Fb.example%2F"
        )

    def test_empty_parameter_set_yields_empty_string(self) -> None:
        assert canonicalize({}) == ""

    def test_repeated_parameter_emits_every_value_sorted(self) -> None:
        assert canonicalize({"category": ["b", "a"], "alt": "json"}) == (
            "alt=json&category=a&category=b"
        )

    def test_values_sort_after_encoding(self) -> None:
        # Raw "-" sorts before "/", encoded "%2F" sorts before "-"
        assert canonicalize({"q": ["-", "/"]}) == "q=%2F&q=-"


    def test_oauth_parameters_in_signing_order(self) -> None:
        params = {
            "xoauth_displayname": "My App",
            "oauth_version": "1.0",
            "scope": "s",
            "oauth_callback": "oob",
            "oauth_consumer_key": "anonymous",
        }
        assert canonicalize(params) == (
            "oauth_callback=oob&oauth_consumer_key=anonymous"
            "&oauth_version=1.0&scope=s&xoauth_displayname=My%20App"
        )


class TestBuildUrl:
    """Tests for build_url."""

    def test_appends_query_string(self) -> None:
        assert build_url("https://x.test/p", {"b": "2", "a": "1"}) == (
            "https://x.test/p?a=1&b=2"
        )

    def test_no_trailing_question_mark_without_params(self) -> None:
        assert build_url("https://x.test/p", {}) == "https://x.test/p"

    def test_extends_existing_query(self) -> None:
        assert build_url("https://x.test/p?x=1", {"a": "1"}) == (
            "https://x.test/p?x=1&a=1"
        )


class TestBuildAuthorizationHeader:
    """Tests for build_authorization_header."""

    def test_quotes_and_sorts_oauth_parameters(self) -> None:
        header = build_authorization_header(
            {
                "oauth_token": "t/1",
                "oauth_consumer_key": "key",
                "oauth_signature": "a+b=",
            }
        )
        assert header == (
            'OAuth oauth_consumer_key="key", oauth_signature="a%2Bb%3D", '
            'oauth_token="t%2F1"'
        )

    def test_skips_non_protocol_parameters(self) -> None:
        header = build_authorization_header(
            {"max-results": "10", "oauth_nonce": "1", "xoauth_displayname": "X"}
        )
        assert "max-results" not in header
        assert header == 'OAuth oauth_nonce="1", xoauth_displayname="X"'

    def test_realm_comes_first(self) -> None:
        header = build_authorization_header({"oauth_nonce": "1"}, realm="https://x.test/")
        assert header == 'OAuth realm="https://x.test/", oauth_nonce="1"'

    def test_no_trailing_delimiter(self) -> None:
        assert not build_authorization_header({"oauth_nonce": "1"}).endswith(", ")
