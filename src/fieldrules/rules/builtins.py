# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Built-in validator generators.

Each generator receives the rule's static args as one tuple at parse time
and returns an async predicate evaluated per value. Only structural
problems (e.g. `len` without bounds) raise, and they raise at parse time.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping, Set
from datetime import datetime
from typing import Any

from fieldrules.core.context import ErrorContext, ValidateContext
from fieldrules.core.types import AsyncPredicate
from fieldrules.errors import RuleParseError, SkipRemaining

from .matchers import (
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
from .registry import RuleConfig

logger = logging.getLogger(__name__)

__all__ = ("ACCEPTED_VALUES", "BUILTIN_RULES", "is_blank")

ACCEPTED_VALUES: tuple[Any, ...] = ("yes", "on", "1", 1, True, "true")

_ALPHA_SETS = {
    "default": re.compile(r"^[a-zA-ZÀ-ÖØ-öø-ÿĄąĆćĘęŁłŃńŚśŹźŻż]+\Z"),
    "latin": re.compile(r"^[a-zA-Z]+\Z"),
}
_ALPHANUMERIC_SETS = {
    "default": re.compile(r"^[a-zA-Z0-9À-ÖØ-öø-ÿĄąĆćĘęŁłŃńŚśŹźŻż]+\Z"),
    "latin": re.compile(r"^[a-zA-Z0-9]+\Z"),
}


def _arg(args: tuple[Any, ...], index: int) -> Any:
    return args[index] if len(args) > index else None


def _is_absent(arg: Any) -> bool:
    return arg is None or (isinstance(arg, str) and not arg.strip())


def _same_value(a: Any, b: Any) -> bool:
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    try:
        return bool(a == b)
    except Exception:
        return False


def _is_sized(value: Any) -> bool:
    return isinstance(value, (str, bytes, list, tuple, Set)) or (
        hasattr(value, "__len__") and not isinstance(value, Mapping)
    )


def is_blank(value: Any) -> bool:
    """None, empty string, or an empty collection/mapping.

    Numbers and booleans are never blank, so `optional|min:1` still checks 0.
    """
    if value is None:
        return True
    if isinstance(value, (str, bytes, Mapping, list, tuple, Set)):
        return len(value) == 0
    return False


# -- presence ------------------------------------------------------------------


def _required(args: tuple[Any, ...]) -> AsyncPredicate:
    trim = _arg(args, 0) == "trim"

    async def predicate(ctx: ValidateContext) -> bool:
        value = ctx.value
        if value is None:
            return False
        if isinstance(value, str):
            return bool(value.strip() if trim else value)
        if isinstance(value, (Mapping, list, tuple, Set, bytes)):
            return len(value) > 0
        return True

    return predicate


def _optional(args: tuple[Any, ...]) -> AsyncPredicate:
    async def predicate(ctx: ValidateContext) -> bool:
        if is_blank(ctx.value):
            raise SkipRemaining(ctx.name)
        return True

    return predicate


def _accepted(args: tuple[Any, ...]) -> AsyncPredicate:
    async def predicate(ctx: ValidateContext) -> bool:
        return any(_same_value(ctx.value, accepted) for accepted in ACCEPTED_VALUES)

    return predicate


# -- dates ---------------------------------------------------------------------


def _date_compare(after: bool):
    def generator(args: tuple[Any, ...]) -> AsyncPredicate:
        compare = _arg(args, 0)

        async def predicate(ctx: ValidateContext) -> bool:
            if _is_absent(compare):
                boundary = datetime.now().timestamp()
            else:
                parsed = parse_date(compare)
                if parsed is None:
                    return False
                boundary = parsed.timestamp()
            value = parse_date(ctx.value)
            if value is None:
                return False
            stamp = value.timestamp()
            return stamp > boundary if after else stamp < boundary

        return predicate

    return generator


def _date(args: tuple[Any, ...]) -> AsyncPredicate:
    fmt = _arg(args, 0)
    if fmt is None:

        async def parses(ctx: ValidateContext) -> bool:
            return parse_date(ctx.value) is not None

        return parses

    try:
        pattern = date_format_to_regex(str(fmt))
    except re.error as e:
        logger.warning("date format %r does not compile: %s", fmt, e)
        pattern = None

    async def matches_format(ctx: ValidateContext) -> bool:
        if pattern is None:
            return False
        text = as_text(ctx.value)
        return text is not None and pattern.fullmatch(text) is not None

    return matches_format


# -- character sets ------------------------------------------------------------


def _charset(sets: Mapping[str, re.Pattern[str]]):
    def generator(args: tuple[Any, ...]) -> AsyncPredicate:
        selected = sets.get(str(_arg(args, 0) or "default"), sets["default"])

        async def predicate(ctx: ValidateContext) -> bool:
            text = as_text(ctx.value)
            return text is not None and selected.fullmatch(text) is not None

        return predicate

    return generator


# -- numbers -------------------------------------------------------------------


def _between(args: tuple[Any, ...]) -> AsyncPredicate:
    low = to_number(_arg(args, 0))
    high = to_number(_arg(args, 1))

    async def predicate(ctx: ValidateContext) -> bool:
        if not is_num(ctx.value):
            return False
        value = to_number(ctx.value)
        return low < value < high

    return predicate


def _min(args: tuple[Any, ...]) -> AsyncPredicate:
    minimum = to_number(_arg(args, 0))

    async def predicate(ctx: ValidateContext) -> bool:
        return is_num(ctx.value) and to_number(ctx.value) >= minimum

    return predicate


def _max(args: tuple[Any, ...]) -> AsyncPredicate:
    maximum = to_number(_arg(args, 0))

    async def predicate(ctx: ValidateContext) -> bool:
        return is_num(ctx.value) and to_number(ctx.value) <= maximum

    return predicate


def _number(args: tuple[Any, ...]) -> AsyncPredicate:
    async def predicate(ctx: ValidateContext) -> bool:
        return is_num(ctx.value)

    return predicate


def _len(args: tuple[Any, ...]) -> AsyncPredicate:
    raw_min, raw_max = _arg(args, 0), _arg(args, 1)
    if _is_absent(raw_min) and _is_absent(raw_max):
        raise RuleParseError(
            "len param error",
            details={"args": list(args), "usage": list(BUILTIN_RULES["len"].usage)},
        )

    lower = 0.0 if _is_absent(raw_min) else to_number(raw_min)
    if len(args) < 2:
        upper = lower
    elif _is_absent(raw_max):
        upper = math.inf
    else:
        upper = to_number(raw_max)
    if math.isnan(lower) or math.isnan(upper):
        raise RuleParseError(
            "len bounds must be numeric",
            details={"args": list(args)},
        )

    async def predicate(ctx: ValidateContext) -> bool:
        value = ctx.value
        if value is None or not _is_sized(value):
            return False
        return lower <= len(value) <= upper

    return predicate


# -- membership and patterns ---------------------------------------------------


def _contains(stack: tuple[Any, ...], value: Any) -> bool:
    for item in stack:
        if _same_value(value, item):
            return True
        if not isinstance(value, str) and as_text(value) == item:
            return True
    return False


def _in(args: tuple[Any, ...]) -> AsyncPredicate:
    async def predicate(ctx: ValidateContext) -> bool:
        return _contains(args, ctx.value)

    return predicate


def _not(args: tuple[Any, ...]) -> AsyncPredicate:
    async def predicate(ctx: ValidateContext) -> bool:
        return not _contains(args, ctx.value)

    return predicate


def _compile_pattern(pattern: Any) -> re.Pattern[str] | Any:
    if isinstance(pattern, re.Pattern):
        return pattern
    if isinstance(pattern, str) and len(pattern) > 1 and pattern.startswith("/") and pattern.endswith("/"):
        try:
            return re.compile(pattern[1:-1])
        except re.error as e:
            logger.warning("matches pattern %r does not compile: %s", pattern, e)
            return None
    return pattern


def _matches(args: tuple[Any, ...]) -> AsyncPredicate:
    patterns = [_compile_pattern(p) for p in args]

    async def predicate(ctx: ValidateContext) -> bool:
        for pattern in patterns:
            if pattern is None:
                continue
            if isinstance(pattern, re.Pattern):
                text = as_text(ctx.value)
                if text is not None and pattern.search(text):
                    return True
            elif ctx.value == pattern:
                return True
        return False

    return predicate


def _starts_with(args: tuple[Any, ...]) -> AsyncPredicate:
    async def predicate(ctx: ValidateContext) -> bool:
        return is_starts_with(ctx.value, *args)

    return predicate


def _ends_with(args: tuple[Any, ...]) -> AsyncPredicate:
    async def predicate(ctx: ValidateContext) -> bool:
        return is_ends_with(ctx.value, *args)

    return predicate


# -- cross-field ---------------------------------------------------------------


def _confirm(args: tuple[Any, ...]) -> AsyncPredicate:
    field = _arg(args, 0)

    async def predicate(ctx: ValidateContext) -> bool:
        target = str(field) if not _is_absent(field) else ctx.name.removesuffix("_confirm")
        return _same_value(ctx.value, ctx.get_value(target))

    return predicate


# -- formats -------------------------------------------------------------------


def _simple(check):
    def generator(args: tuple[Any, ...]) -> AsyncPredicate:
        async def predicate(ctx: ValidateContext) -> bool:
            return check(ctx.value)

        return predicate

    return generator


def _url(args: tuple[Any, ...]) -> AsyncPredicate:
    part = _arg(args, 0)
    if part is None:
        check = is_url
    elif part == "host":
        check = is_host
    else:
        check = is_https_url
    return _simple(check)(args)


_IP_CHECKS = {None: is_ip, "v4": is_ipv4, "v6": is_ipv6}


def _ip(args: tuple[Any, ...]) -> AsyncPredicate:
    version = _arg(args, 0)
    if version not in _IP_CHECKS:
        raise RuleParseError(
            f"Unsupported ip version {version!r}",
            details={"args": list(args), "expected": ["v4", "v6"]},
        )
    return _simple(_IP_CHECKS[version])(args)


def _tel(value: Any) -> bool:
    return is_tel(value) or is_phone(value)


# -- messages ------------------------------------------------------------------


def _len_message(ctx: ErrorContext, *params: Any) -> str:
    low = params[0] if params else None
    high = params[1] if len(params) > 1 else low
    if _is_absent(high):
        return f"{ctx.name} length must be at least {low}"
    if _is_absent(low):
        return f"{ctx.name} length must be at most {high}"
    if low == high:
        return f"{ctx.name} length must be exactly {low}"
    return f"{ctx.name} length must be between {low} and {high}"


BUILTIN_RULES: dict[str, RuleConfig] = {
    "accepted": RuleConfig(
        generator=_accepted,
        usage='accepted //the value must be "yes", "on", "1", or true',
        error_msg={"_": "{name} must be accepted"},
    ),
    "after": RuleConfig(
        generator=_date_compare(after=True),
        usage=["after", "after:2022-01-01 //later than 2022-01-01"],
        error_msg={"_": "{name} must be after {params}"},
    ),
    "alpha": RuleConfig(
        generator=_charset(_ALPHA_SETS),
        usage=["alpha", "alpha:latin"],
        error_msg={"_": "{name} may only contain letters"},
    ),
    "alphanumeric": RuleConfig(
        generator=_charset(_ALPHANUMERIC_SETS),
        usage=["alphanumeric", "alphanumeric:latin"],
        error_msg={"_": "{name} may only contain letters and numbers"},
    ),
    "before": RuleConfig(
        generator=_date_compare(after=False),
        usage=["before", "before:2022-01-01"],
        error_msg={"_": "{name} must be before {params}"},
    ),
    "between": RuleConfig(
        generator=_between,
        usage=["between:1,10 // >1 && <10"],
        error_msg={"_": "{name} must be between {params}"},
    ),
    "confirm": RuleConfig(
        generator=_confirm,
        usage=[
            "confirm //equals the field named without the '_confirm' suffix",
            "confirm:pwd //equals the pwd field",
        ],
        error_msg={"_": "{name} does not match"},
    ),
    "date": RuleConfig(
        generator=_date,
        usage=["date", "date:YYYY-MM-DD"],
        error_msg={"_": "{name} is not a valid date"},
    ),
    "email": RuleConfig(
        generator=_simple(is_email),
        usage="email",
        error_msg={"_": "{name} must be a valid email address"},
    ),
    "ends_with": RuleConfig(
        generator=_ends_with,
        usage="ends_with:abc,123 //ends with abc or 123",
        error_msg={"_": "{name} must end with one of {params}"},
    ),
    "in": RuleConfig(
        generator=_in,
        usage="in:beijing,shanghai //is beijing or shanghai",
        error_msg={"_": "{name} must be one of {params}"},
    ),
    "matches": RuleConfig(
        generator=_matches,
        usage=[
            "matches:/\\d+/ //matches the regex",
            "matches:beijing,/\\d+/ //is beijing or matches the regex",
        ],
        error_msg={"_": "{name} has an invalid format"},
    ),
    "min": RuleConfig(
        generator=_min,
        usage="min:10 //>=10",
        error_msg={"_": "{name} must be at least {params}"},
    ),
    "max": RuleConfig(
        generator=_max,
        usage="max:10 //<=10",
        error_msg={"_": "{name} must be at most {params}"},
    ),
    "not": RuleConfig(
        generator=_not,
        usage="not:beijing,shanghai //neither beijing nor shanghai",
        error_msg={"_": "{name} must not be one of {params}"},
    ),
    "number": RuleConfig(
        generator=_number,
        usage="number",
        error_msg={"_": "{name} must be a number"},
    ),
    "required": RuleConfig(
        generator=_required,
        usage=["required", "required:trim //ignore surrounding whitespace"],
        error_msg={"_": "{name} is required"},
    ),
    "starts_with": RuleConfig(
        generator=_starts_with,
        usage="starts_with:abc,123 //starts with abc or 123",
        error_msg={"_": "{name} must start with one of {params}"},
    ),
    "url": RuleConfig(
        generator=_url,
        usage=["url", "url:https //https only", "url:host //a host name"],
        error_msg={"_": "{name} must be a valid URL"},
    ),
    "optional": RuleConfig(
        generator=_optional,
        usage="optional|email //may be blank, otherwise must be an email",
        error_msg={"_": ""},
    ),
    "len": RuleConfig(
        generator=_len,
        usage=[
            "len:10 // length == 10",
            "len:4,10 // length >= 4 && <= 10",
            "len:4, // length >= 4",
            "len:,10 // length <= 10",
        ],
        error_msg={"_": _len_message},
    ),
    "idcard": RuleConfig(
        generator=_simple(is_id_card),
        usage="idcard",
        error_msg={"_": "{name} is not a valid ID card number", "zh": "身份证号码格式错误"},
    ),
    "mobile": RuleConfig(
        generator=_simple(is_phone),
        usage="mobile",
        error_msg={"_": "{name} is not a valid mobile number", "zh": "手机号格式错误"},
    ),
    "tel": RuleConfig(
        generator=_simple(_tel),
        usage="tel",
        error_msg={
            "_": "{value} is not a valid phone number",
            "zh": "{value} 不是一个正确手机或电话号",
        },
    ),
    "ip": RuleConfig(
        generator=_ip,
        usage=["ip //IPv4 or IPv6", "ip:v6 //IPv6", "ip:v4 //IPv4"],
        error_msg={"_": "{name} is not a valid IP address", "zh": "IP地址格式不正确"},
    ),
}
