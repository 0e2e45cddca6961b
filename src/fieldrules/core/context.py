# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Per-evaluation contexts handed to predicates and message templates."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

__all__ = ("ErrorContext", "ValidateContext", "resolver_from_mapping")


def _no_value(name: str) -> Any:
    return None


def resolver_from_mapping(values: Mapping[str, Any]) -> Callable[[str], Any]:
    """Build a `get_value` resolver over a mapping (missing keys -> None)."""
    return values.get


@dataclass(frozen=True, slots=True)
class ValidateContext:
    """What a predicate sees: the field, its value, and cross-field lookup.

    Attributes:
        name: Field name being validated.
        value: Raw field value.
        get_value: Resolves another field's value by name.
    """

    name: str
    value: Any = None
    get_value: Callable[[str], Any] = field(default=_no_value, repr=False)

    @classmethod
    def from_mapping(cls, name: str, values: Mapping[str, Any]) -> ValidateContext:
        """Context for `name` with lookups served from `values`."""
        return cls(name=name, value=values.get(name), get_value=resolver_from_mapping(values))

    def with_params(self, params: tuple[Any, ...]) -> ErrorContext:
        return ErrorContext(
            name=self.name,
            value=self.value,
            get_value=self.get_value,
            params=tuple(params),
        )


@dataclass(frozen=True, slots=True)
class ErrorContext(ValidateContext):
    """ValidateContext plus the static args bound at parse time."""

    params: tuple[Any, ...] = ()
