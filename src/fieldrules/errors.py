# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Exception hierarchy for fieldrules.

Two failure classes exist:
- Structural errors (bad rule specs, bad rule definitions) raise immediately.
- Evaluation failures never raise; predicates resolve False. The one
  exception is SkipRemaining, a control signal from the `optional` rule.
"""

from __future__ import annotations

from typing import Any

__all__ = (
    "ConfigurationError",
    "FieldRulesError",
    "RuleParseError",
    "SkipRemaining",
    "UnknownRuleError",
)


class FieldRulesError(Exception):
    """Base error with structured details and a retryable hint.

    Attributes:
        message: Human-readable description.
        details: Extra context for logs and serialization.
        retryable: Whether repeating the operation can succeed.
        cause: Underlying exception, if any.
    """

    default_message: str = "Field rules error"
    default_retryable: bool = False

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
        retryable: bool | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.details = details or {}
        self.retryable = self.default_retryable if retryable is None else retryable
        self.cause = cause
        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain dict."""
        data: dict[str, Any] = {
            "error": type(self).__name__,
            "message": self.message,
            "retryable": self.retryable,
            "details": dict(self.details),
        }
        if self.cause is not None:
            data["cause"] = repr(self.cause)
        return data


class ConfigurationError(FieldRulesError):
    """Invalid rule definition or engine configuration."""

    default_message = "Invalid configuration"


class RuleParseError(FieldRulesError):
    """Rule specification could not be parsed."""

    default_message = "Invalid validation rule"


class UnknownRuleError(RuleParseError):
    """Rule name is not present in the registry."""

    default_message = "Unknown validation rule"

    def __init__(self, rule: str, **kwargs: Any) -> None:
        self.rule = rule
        details = {"rule": rule, **kwargs.pop("details", {})}
        super().__init__(f"Unknown validation rule {rule}", details=details, **kwargs)


class SkipRemaining(Exception):  # noqa: N818
    """Stop evaluating the chain; the field is valid by absence.

    Raised by predicates (the built-in `optional` rule) instead of
    returning a bool. Not an error.
    """
