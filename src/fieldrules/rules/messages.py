# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Error message resolution for failed rules.

Lookup order: requested locale -> fallback locale ("_") -> generic message.
String templates may reference {name}, {value}, {rule} and {params};
callable templates receive (ErrorContext, *params) and may return None to
fall through to the next candidate.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fieldrules.core.context import ErrorContext

    from .registry import RuleConfig

__all__ = ("generic_message", "render_template", "resolve_error_message")

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


def generic_message(ctx: ErrorContext, rule: str | None) -> str:
    if rule:
        return f"{ctx.name} failed validation rule '{rule}'"
    return f"{ctx.name} is invalid"


def render_template(template: Any, ctx: ErrorContext, rule: str | None) -> str | None:
    """Render one template; None means "no message from this template"."""
    if callable(template):
        result = template(ctx, *ctx.params)
        return None if result is None else str(result)
    if not isinstance(template, str):
        return None

    fields = {
        "name": ctx.name,
        "value": "" if ctx.value is None else str(ctx.value),
        "rule": rule or "",
        "params": ",".join(str(p) for p in ctx.params),
    }
    return _PLACEHOLDER_RE.sub(lambda m: fields.get(m.group(1), m.group(0)), template)


def resolve_error_message(
    config: RuleConfig | None,
    ctx: ErrorContext,
    *,
    rule: str | None = None,
    locale: str | None = None,
    fallback_locale: str = "_",
) -> str:
    """Pick and render the message for a failed rule.

    Args:
        config: The failed rule's config; None for bare callables.
        ctx: Error context (field, value, static params).
        rule: Canonical rule name, used by {rule} and the generic message.
        locale: Requested locale key.
        fallback_locale: Key tried when the locale has no message.
    """
    if config is not None:
        for key in (locale, fallback_locale):
            if key is None or key not in config.error_msg:
                continue
            message = render_template(config.error_msg[key], ctx, rule)
            if message is not None:
                return message
    return generic_message(ctx, rule)
