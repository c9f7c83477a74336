"""Tests for list parsing helpers."""

import pytest

from azfunc_mcp.utilities.parsing import (
    parse_client_ids,
    parse_comma_separated,
    parse_scopes,
    unique,
)


class TestParseClientIds:
    def test_trims_and_drops_blank_tokens(self):
        assert parse_client_ids("a, b,, c ") == ["a", "b", "c"]

    def test_trailing_separator(self):
        assert parse_client_ids("a,b,") == ["a", "b"]

    def test_empty_and_none(self):
        assert parse_client_ids("") == []
        assert parse_client_ids("  ,  ") == []
        assert parse_client_ids(None) == []

    def test_list_input(self):
        assert parse_client_ids([" a", "", "b "]) == ["a", "b"]

    def test_keeps_duplicates_and_order(self):
        assert parse_client_ids("b,a,b") == ["b", "a", "b"]

    def test_invalid_type(self):
        with pytest.raises(ValueError, match="Invalid comma-separated value"):
            parse_client_ids(42)


class TestParseScopes:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("User.Read", ["User.Read"]),
            ("User.Read,openid", ["User.Read", "openid"]),
            ("User.Read openid", ["User.Read", "openid"]),
            ('["User.Read", "openid"]', ["User.Read", "openid"]),
            (["User.Read", " "], ["User.Read"]),
            ("", []),
        ],
    )
    def test_formats(self, value, expected):
        assert parse_scopes(value) == expected

    def test_none(self):
        assert parse_scopes(None) is None

    def test_malformed_json_falls_back_to_splitting(self):
        assert parse_scopes("[User.Read") == ["[User.Read"]


def test_parse_comma_separated_uris():
    assert parse_comma_separated("https://a/cb, https://b/cb") == [
        "https://a/cb",
        "https://b/cb",
    ]


def test_unique_keeps_first_seen_order():
    assert unique(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
