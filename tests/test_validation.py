"""Tests for tweetspy.validation module."""

from __future__ import annotations

import pytest

from tweetspy.validation import (
    Invalid,
    Valid,
    parse_language,
    parse_switch,
    require_argument,
    split_login,
)


class TestRequireArgument:
    @pytest.mark.parametrize("raw", [None, "", "   ", "\t\n"])
    def test_blank_is_missing(self, raw: str | None) -> None:
        assert require_argument(raw, "need it") == Invalid("need it")

    def test_trims(self) -> None:
        assert require_argument("  iphone OR android ") == Valid("iphone OR android")


class TestParseSwitch:
    @pytest.mark.parametrize(
        ("raw", "expected"), [("on", True), ("ON", True), (" Off ", False)]
    )
    def test_on_off(self, raw: str, expected: bool) -> None:
        assert parse_switch(raw, "bad") == Valid(expected)

    def test_other_values_invalid(self) -> None:
        assert parse_switch("maybe", "bad") == Invalid("bad")


class TestSplitLogin:
    def test_password_keeps_inner_whitespace(self) -> None:
        assert split_login("bob  pass word  ", "x") == Valid(("bob", "pass word"))

    def test_missing_password(self) -> None:
        assert split_login("bob", "need both") == Invalid("need both")


class TestParseLanguage:
    @pytest.mark.parametrize("raw", [None, "", "  "])
    def test_blank_clears(self, raw: str | None) -> None:
        assert parse_language(raw, "bad") == Valid(None)

    def test_two_characters(self) -> None:
        assert parse_language(" en ", "bad") == Valid("en")

    @pytest.mark.parametrize("raw", ["e", "abc", "english"])
    def test_wrong_length(self, raw: str) -> None:
        assert parse_language(raw, "bad") == Invalid("bad")
