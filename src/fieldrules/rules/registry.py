# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Rule registry: canonical rule name -> RuleConfig.

Write-rarely, read-many. Writes are serialized by a lock and publish a new
read-only snapshot (copy-on-write), so parsing can read concurrently with
an occasional define_rule call. The `version` counter lets parsers drop
cached chains built against an older snapshot.

Example:
    registry = RuleRegistry()
    registry.register("startsWith", RuleConfig(generator=gen, usage="starts_with:a"))
    registry.get("starts_with")   # same entry
"""

from __future__ import annotations

import logging
import re
import sys
import threading
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import Any, TextIO

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from fieldrules.core.types import Generator
from fieldrules.errors import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = (
    "RuleConfig",
    "RuleRegistry",
    "canonical_name",
    "define_rule",
    "get_default_registry",
    "print_rules_usage",
    "reset_default_registry",
    "rule",
)

_WORD_RE = re.compile(r"[A-Z]+(?![a-z])|[A-Z]?[a-z]+|\d+")

MessageTemplate = str | Callable[..., str | None]


def canonical_name(name: str) -> str:
    """Normalize a rule name to snake_case.

    "startsWith", "starts_with", "starts-with", "Starts With" -> "starts_with".
    """
    return "_".join(word.lower() for word in _WORD_RE.findall(name))


class RuleConfig(BaseModel):
    """Definition of one rule.

    Attributes:
        generator: (static_args) -> async predicate.
        usage: Usage lines for documentation/tooling.
        error_msg: Locale -> message string or template callable. The
            "_" key is the default.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    generator: Callable[..., Any] = Field(..., exclude=True)
    usage: tuple[str, ...] = Field(default=())
    error_msg: dict[str, MessageTemplate] = Field(default_factory=dict)

    @field_validator("usage", mode="before")
    @classmethod
    def _wrap_usage(cls, v: Any) -> Any:
        if v is None:
            return ()
        if isinstance(v, str):
            return (v,)
        return v

    def with_messages(self, messages: Mapping[str, MessageTemplate]) -> RuleConfig:
        """Copy with `messages` merged over the existing error_msg."""
        return self.model_copy(update={"error_msg": {**self.error_msg, **messages}})


def _coerce_config(config: RuleConfig | Mapping[str, Any]) -> RuleConfig:
    if isinstance(config, RuleConfig):
        return config
    try:
        return RuleConfig.model_validate(dict(config))
    except (TypeError, ValueError, ValidationError) as e:
        raise ConfigurationError(
            "Invalid rule config",
            details={"config": repr(config)},
            cause=e,
        ) from e


class RuleRegistry:
    """Map canonical rule names to RuleConfig.

    Lookups accept any casing style; keys are stored in snake_case.
    Re-registering a name replaces the entry and logs a warning.
    """

    def __init__(self, rules: Mapping[str, RuleConfig | Mapping[str, Any]] | None = None):
        self._lock = threading.Lock()
        self._rules: Mapping[str, RuleConfig] = MappingProxyType({})
        self._version = 0
        for name, config in (rules or {}).items():
            self.register(name, config)

    @property
    def version(self) -> int:
        """Incremented on every mutation."""
        return self._version

    def register(
        self,
        name: str,
        config: RuleConfig | Mapping[str, Any],
        *,
        warn: bool = True,
    ) -> RuleConfig:
        """Register (or replace) a rule.

        Args:
            name: Rule name in any casing style.
            config: RuleConfig or a mapping accepted by RuleConfig.
            warn: Log a warning when an existing rule is replaced.

        Returns:
            The stored RuleConfig.

        Raises:
            ConfigurationError: Empty name or invalid config.
        """
        key = canonical_name(name)
        if not key:
            raise ConfigurationError(
                f"Invalid rule name {name!r}", details={"name": name}
            )
        stored = _coerce_config(config)

        with self._lock:
            if key in self._rules and warn:
                logger.warning("validator rule[%s] will be overridden.", name)
            updated = dict(self._rules)
            updated[key] = stored
            self._rules = MappingProxyType(updated)
            self._version += 1
        return stored

    def set_messages(self, name: str, messages: Mapping[str, MessageTemplate]) -> RuleConfig:
        """Merge locale messages into an existing rule's error_msg.

        Raises:
            KeyError: If the rule is not registered.
        """
        config = self.get(name)
        return self.register(name, config.with_messages(messages), warn=False)

    def unregister(self, name: str) -> bool:
        """Remove a rule. Returns True if it existed."""
        key = canonical_name(name)
        with self._lock:
            if key not in self._rules:
                return False
            updated = dict(self._rules)
            del updated[key]
            self._rules = MappingProxyType(updated)
            self._version += 1
        return True

    def lookup(self, name: str) -> RuleConfig | None:
        """Return the rule config, or None if not registered."""
        return self._rules.get(canonical_name(name))

    def get(self, name: str) -> RuleConfig:
        """Return the rule config. Raises KeyError with available names."""
        config = self.lookup(name)
        if config is None:
            raise KeyError(
                f"Rule '{name}' not registered. Available: {self.list_names()}"
            )
        return config

    def has(self, name: str) -> bool:
        return canonical_name(name) in self._rules

    def snapshot(self) -> Mapping[str, RuleConfig]:
        """Current read-only view of all rules."""
        return self._rules

    def list_names(self) -> list[str]:
        return list(self._rules.keys())

    def list_usage(self) -> list[str]:
        """Usage lines of every rule, in registration order."""
        return [line for config in self._rules.values() for line in config.usage]

    def copy(self) -> RuleRegistry:
        """Independent registry with the same entries."""
        return RuleRegistry(dict(self._rules))

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleRegistry(rules={self.list_names()})"


_default_registry: RuleRegistry | None = None
_default_lock = threading.Lock()


def get_default_registry() -> RuleRegistry:
    """Process-wide registry, populated with the built-in rules on first use."""
    global _default_registry
    if _default_registry is None:
        with _default_lock:
            if _default_registry is None:
                from .builtins import BUILTIN_RULES

                _default_registry = RuleRegistry(BUILTIN_RULES)
    return _default_registry


def reset_default_registry() -> None:
    """Drop the process-wide registry; the next access rebuilds the built-ins."""
    global _default_registry
    with _default_lock:
        _default_registry = None


def define_rule(
    name: str,
    config: RuleConfig | Mapping[str, Any] | list[RuleConfig | Mapping[str, Any]],
    *,
    registry: RuleRegistry | None = None,
) -> None:
    """Add or override rule definitions; overrides log a warning.

    A list registers each entry under `name` in order, so the last one wins.
    """
    target = get_default_registry() if registry is None else registry
    configs = config if isinstance(config, list) else [config]
    for item in configs:
        target.register(name, item)


def rule(
    name: str | None = None,
    *,
    usage: str | list[str] | None = None,
    error_msg: Mapping[str, MessageTemplate] | None = None,
    registry: RuleRegistry | None = None,
) -> Callable[[Generator], Generator]:
    """Decorator registering a generator function as a rule.

    Usage:
        @rule("even")
        def even(args):
            async def predicate(ctx):
                return is_num(ctx.value) and int(ctx.value) % 2 == 0
            return predicate
    """

    def decorator(generator: Generator) -> Generator:
        rule_name = name or generator.__name__
        define_rule(
            rule_name,
            RuleConfig(
                generator=generator,
                usage=usage if usage is not None else rule_name,
                error_msg=dict(error_msg or {}),
            ),
            registry=registry,
        )
        return generator

    return decorator


def print_rules_usage(
    registry: RuleRegistry | None = None, file: TextIO | None = None
) -> None:
    """Write every rule's usage lines, one per line."""
    out = file or sys.stdout
    target = get_default_registry() if registry is None else registry
    for line in target.list_usage():
        print(line, file=out)
