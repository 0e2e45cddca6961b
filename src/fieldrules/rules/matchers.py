# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Primitive matchers: pure, stateless predicates over raw values.

Regex-based matchers accept strings and real numbers (stringified); any
other type does not match.
"""

from __future__ import annotations

import math
import re
from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime
from ipaddress import IPv4Address, IPv6Address
from typing import Any

__all__ = (
    "as_text",
    "date_format_to_regex",
    "is_email",
    "is_ends_with",
    "is_host",
    "is_https_url",
    "is_id_card",
    "is_ip",
    "is_ipv4",
    "is_ipv6",
    "is_num",
    "is_phone",
    "is_starts_with",
    "is_tel",
    "is_url",
    "parse_date",
    "to_number",
)

# ASCII-only \d and \w; \Z rather than $ so a trailing newline never matches.
_URL_TAIL = r"[\w\-_]+(\.[\w\-_]+)*([\w\-.,@?^=%&:/~+#]*[\w\-@?^=%&/~+#])?"
_URL_RE = re.compile(r"(http|ftp|https)://" + _URL_TAIL, re.ASCII)
_HTTPS_URL_RE = re.compile(r"https://" + _URL_TAIL, re.ASCII)
_HOST_RE = re.compile(r"[\w\-_]+(\.[\w\-_]+)*(:\d+)?", re.ASCII)
_EMAIL_RE = re.compile(
    r"^[A-Za-z\d]+([-_.][A-Za-z\d]+)*@([A-Za-z\d]+[-.])+[A-Za-z\d]{2,4}\Z",
    re.ASCII,
)
_PHONE_RE = re.compile(r"^1[3-9]\d{9}\Z", re.ASCII)
_ID_CARD_RE = re.compile(
    r"^[1-9]\d{5}(18|19|20|(3\d))\d{2}((0[1-9])|(1[0-2]))"
    r"(([0-2][1-9])|10|20|30|31)\d{3}[0-9Xx]\Z",
    re.ASCII,
)
_TEL_RE = re.compile(r"^((0\d{2,3})-)(\d{7,8})(-(\d{3,}))?\Z", re.ASCII)
_DIGITS_RE = re.compile(r"^\d*\Z", re.ASCII)

# Replacement order matters: longer tokens first within each letter.
_DATE_TOKENS: tuple[tuple[str, str], ...] = (
    ("MM", r"(0[1-9]|1[012])"),
    ("M", r"([1-9]|1[012])"),
    ("DD", r"([012][0-9]|3[01])"),
    ("D", r"([012]?[0-9]|3[01])"),
    ("YYYY", r"\d{4}"),
    ("YY", r"\d{2}"),
)

_SLASH_DATE_FORMATS = (
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
)


def _is_real_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def as_text(value: Any) -> str | None:
    """Return `value` as text for pattern matching, or None if not textual."""
    if isinstance(value, str):
        return value
    if _is_real_number(value):
        return str(value)
    return None


def _search(pattern: re.Pattern[str], value: Any) -> bool:
    text = as_text(value)
    return text is not None and pattern.search(text) is not None


def is_url(value: Any) -> bool:
    return _search(_URL_RE, value)


def is_https_url(value: Any) -> bool:
    return _search(_HTTPS_URL_RE, value)


def is_host(value: Any) -> bool:
    """Host name or IP, optionally with a port."""
    return _search(_HOST_RE, value)


def is_email(value: Any) -> bool:
    return _search(_EMAIL_RE, value)


def is_phone(value: Any) -> bool:
    """Mainland China mobile number."""
    return _search(_PHONE_RE, value)


def is_id_card(value: Any) -> bool:
    """Mainland China resident identity card number (18 digits)."""
    return _search(_ID_CARD_RE, value)


def is_tel(value: Any) -> bool:
    """Mainland China landline: area code, number and optional extension."""
    return _search(_TEL_RE, value)


def is_ipv4(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        IPv4Address(value)
    except ValueError:
        return False
    return True


def is_ipv6(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        IPv6Address(value)
    except ValueError:
        return False
    return True


def is_ip(value: Any) -> bool:
    return is_ipv4(value) or is_ipv6(value)


def is_num(value: Any) -> bool:
    """True for real numbers and for digit-only strings (including "")."""
    if _is_real_number(value):
        return True
    return isinstance(value, str) and _DIGITS_RE.fullmatch(value) is not None


def to_number(value: Any) -> float:
    """Loose numeric conversion; blank strings are 0, garbage is NaN."""
    if isinstance(value, bool):
        return float(value)
    if _is_real_number(value):
        return float(value)
    if value is None:
        return math.nan
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def is_starts_with(value: Any, *prefixes: str) -> bool:
    if not prefixes:
        return True
    text = as_text(value)
    if not text:
        return False
    return text.startswith(tuple(str(p) for p in prefixes))


def is_ends_with(value: Any, *suffixes: str) -> bool:
    if not suffixes:
        return True
    text = as_text(value)
    if not text:
        return False
    return text.endswith(tuple(str(s) for s in suffixes))


def date_format_to_regex(fmt: str) -> re.Pattern[str]:
    """Translate a YYYY/YY/MM/M/DD/D format into an anchored pattern.

    Each token is substituted once, at its first occurrence. The result
    checks shape only: "2022-02-30" matches "YYYY-MM-DD".

    Raises:
        re.error: If the resulting pattern does not compile.
    """
    pattern = re.escape(fmt)
    for token, replacement in _DATE_TOKENS:
        pattern = pattern.replace(token, replacement, 1)
    return re.compile(f"^{pattern}\\Z", re.ASCII)


def parse_date(value: Any) -> datetime | None:
    """Parse a date-like value into a datetime, or None if unparseable.

    Accepts date/datetime objects, ISO-8601 strings (a trailing "Z" means
    UTC; date-only strings are UTC midnight), RFC 2822 strings and a few
    slash-separated forms. Naive results are local time.
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    try:
        if len(text) == 10 and text[4] == "-":
            return datetime.fromisoformat(text).replace(tzinfo=timezone.utc)
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        pass

    for fmt in _SLASH_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None
