# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for fieldrules.rules.matchers - primitive predicates."""

from __future__ import annotations

import math
from datetime import date, datetime, timezone

import pytest

from fieldrules.rules.matchers import (
    as_text,
    date_format_to_regex,
    is_email,
    is_ends_with,
    is_host,
    is_https_url,
    is_id_card,
    is_ip,
    is_ipv4,
    is_ipv6,
    is_num,
    is_phone,
    is_starts_with,
    is_tel,
    is_url,
    parse_date,
    to_number,
)


class TestAsText:
    def test_strings_pass_through(self):
        assert as_text("abc") == "abc"

    def test_numbers_are_stringified(self):
        assert as_text(12) == "12"
        assert as_text(1.5) == "1.5"

    def test_other_types_are_not_text(self):
        assert as_text(None) is None
        assert as_text(True) is None
        assert as_text(["a"]) is None


class TestNumbers:
    @pytest.mark.parametrize("value", [0, 5, -3, 2.5, "123", ""])
    def test_is_num_accepts(self, value):
        assert is_num(value) is True

    @pytest.mark.parametrize("value", ["12a", "-1", "1.5", None, True, [1]])
    def test_is_num_rejects(self, value):
        assert is_num(value) is False

    def test_to_number_blank_is_zero(self):
        assert to_number("") == 0.0
        assert to_number("  ") == 0.0

    def test_to_number_parses_strings(self):
        assert to_number("10") == 10.0
        assert to_number(" 2.5 ") == 2.5

    def test_to_number_garbage_is_nan(self):
        assert math.isnan(to_number("abc"))
        assert math.isnan(to_number(None))
        assert math.isnan(to_number(object()))


class TestFormats:
    @pytest.mark.parametrize(
        "value",
        ["user@example.com", "first.last@mail.example.org", "a_b-c@x.cn"],
    )
    def test_valid_emails(self, value):
        assert is_email(value)

    @pytest.mark.parametrize(
        "value", ["not-an-email", "a@b", "@example.com", "a@example.comcom", None]
    )
    def test_invalid_emails(self, value):
        assert not is_email(value)

    def test_url(self):
        assert is_url("http://example.com/path?q=1")
        assert is_url("ftp://files.example.com")
        assert not is_url("example.com")

    def test_https_url(self):
        assert is_https_url("https://example.com")
        assert not is_https_url("http://example.com")

    def test_host(self):
        assert is_host("example.com:8080")
        assert not is_host("")

    def test_phone(self):
        assert is_phone("13812345678")
        assert not is_phone("12812345678")
        assert not is_phone("1381234567")

    def test_tel(self):
        assert is_tel("010-12345678")
        assert is_tel("0755-1234567-123")
        assert not is_tel("12345678")

    def test_id_card(self):
        assert is_id_card("11010519491231002X")
        assert is_id_card("110105194912310021")
        assert not is_id_card("11010519491331002X")
        assert not is_id_card("010105194912310021")

    def test_ip(self):
        assert is_ipv4("192.168.0.1")
        assert not is_ipv4("::1")
        assert is_ipv6("::1")
        assert not is_ipv6("192.168.0.1")
        assert is_ip("10.0.0.1") and is_ip("fe80::1")
        assert not is_ip("999.1.1.1")
        assert not is_ip(None)


class TestAffixes:
    def test_no_affixes_always_matches(self):
        assert is_starts_with("anything")
        assert is_ends_with("")

    def test_empty_value_never_matches(self):
        assert not is_starts_with("", "a")
        assert not is_ends_with(None, "a")

    def test_any_affix_matches(self):
        assert is_starts_with("abcdef", "xyz", "abc")
        assert is_ends_with("file123", "abc", "123")
        assert not is_ends_with("file", "abc", "123")


class TestDateFormatToRegex:
    def test_full_format(self):
        pattern = date_format_to_regex("YYYY-MM-DD")
        assert pattern.match("2022-01-01")
        assert not pattern.match("2022-13-01")
        assert not pattern.match("22-01-01")

    def test_no_calendar_check(self):
        assert date_format_to_regex("YYYY-MM-DD").match("2022-02-30")

    def test_anchored(self):
        assert not date_format_to_regex("YYYY-MM-DD").match("x2022-01-01")
        assert not date_format_to_regex("YYYY-MM-DD").match("2022-01-01x")

    def test_short_tokens(self):
        pattern = date_format_to_regex("YY/M/D")
        assert pattern.match("22/1/5")
        assert pattern.match("22/12/31")
        assert not pattern.match("2022/1/5")

    def test_literals_are_escaped(self):
        pattern = date_format_to_regex("YYYY.MM")
        assert pattern.match("2022.01")
        assert not pattern.match("2022x01")


class TestParseDate:
    def test_iso_date_is_utc_midnight(self):
        parsed = parse_date("2022-01-01")
        assert parsed == datetime(2022, 1, 1, tzinfo=timezone.utc)

    def test_iso_datetime_with_z(self):
        parsed = parse_date("2022-01-01T10:00:00Z")
        assert parsed == datetime(2022, 1, 1, 10, tzinfo=timezone.utc)

    def test_rfc2822(self):
        parsed = parse_date("Sat, 01 Jan 2022 10:00:00 +0000")
        assert parsed == datetime(2022, 1, 1, 10, tzinfo=timezone.utc)

    def test_slash_format(self):
        assert parse_date("2022/01/31") == datetime(2022, 1, 31)

    def test_date_objects(self):
        assert parse_date(date(2022, 1, 1)) == datetime(2022, 1, 1, tzinfo=timezone.utc)
        moment = datetime(2022, 1, 1, 8)
        assert parse_date(moment) is moment

    @pytest.mark.parametrize("value", ["not a date", "", None, 12, "2022-02-30"])
    def test_unparseable(self, value):
        assert parse_date(value) is None


class TestWholeStringAnchoring:
    """Anchored matchers cover the whole value and only ASCII digits."""

    @pytest.mark.parametrize(
        ("matcher", "value"),
        [
            (is_email, "user@example.com\n"),
            (is_email, "user@example.com "),
            (is_phone, "13812345678\n"),
            (is_id_card, "11010519491231002X\n"),
            (is_tel, "010-12345678\n"),
            (is_num, "12\n"),
            (is_num, "12 "),
        ],
    )
    def test_trailing_whitespace_rejected(self, matcher, value):
        assert not matcher(value)

    @pytest.mark.parametrize(
        ("matcher", "value"),
        [
            (is_num, "١٢"),
            (is_num, "１２"),
            (is_phone, "1٣812345678"),
            (is_tel, "010-١2345678"),
            (is_email, "user@exampl٢.com"),
        ],
    )
    def test_non_ascii_digits_rejected(self, matcher, value):
        assert not matcher(value)

    @pytest.mark.parametrize("value", ["2022-01-01\n", "2022-01-01 ", "٢٠٢٢-01-01"])
    def test_date_format(self, value):
        assert not date_format_to_regex("YYYY-MM-DD").match(value)
