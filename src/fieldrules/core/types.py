# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Shared types: predicates, generators, parsed rules and verdicts."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple

if TYPE_CHECKING:
    from .context import ValidateContext

__all__ = (
    "AsyncPredicate",
    "Generator",
    "Modifier",
    "ParsedRule",
    "Verdict",
)

AsyncPredicate = Callable[["ValidateContext"], Awaitable[bool]]
"""Predicate signature: async (ctx) -> bool. May raise SkipRemaining."""

Generator = Callable[[tuple[Any, ...]], AsyncPredicate]
"""Generator signature: (static_args) -> AsyncPredicate."""


class Modifier(str, Enum):
    """Per-rule chain modifier."""

    ABORT = "^"
    """Stop checking the field if this rule fails."""


class Verdict(str, Enum):
    """Outcome of one rule invocation."""

    PASS = "pass"
    FAIL = "fail"
    SKIP_REMAINING = "skip_remaining"


class ParsedRule(NamedTuple):
    """A rule bound to its static args, ready to evaluate.

    Attributes:
        predicate: Bound async predicate.
        params: Static args closed over by the predicate.
        name: Canonical rule name; None for bare callables.
        modifier: Modifier.ABORT or None.
    """

    predicate: Callable[..., Any]
    params: tuple[Any, ...] = ()
    name: str | None = None
    modifier: Modifier | None = None

    @property
    def aborts_on_failure(self) -> bool:
        return self.modifier is Modifier.ABORT
