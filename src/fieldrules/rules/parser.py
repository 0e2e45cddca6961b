# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Rule specification parser.

Grammar:
    "rule1:arg1,arg2|rule2|^rule3:arg"

- '|' separates rules; ':' separates a name from its args (first colon
  only); ',' separates args. There is no escaping, so an argument cannot
  contain a comma: "matches:/\\d{1,3}/" yields two args.
- A leading '^' marks the rule as aborting the chain when it fails.

A spec may also be a callable predicate, or a list whose elements are
strings, callables, or [rule, *args] lists:

    ["required", ["between", 1, 10], my_async_check]

Parsing fails fast: unknown rule names raise UnknownRuleError here, never
at evaluation time.
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections import OrderedDict
from typing import TYPE_CHECKING, Any

from fieldrules.config import DEFAULT_CONFIG, ValidatorConfig
from fieldrules.core.types import Modifier, ParsedRule
from fieldrules.errors import FieldRulesError, RuleParseError, UnknownRuleError

from .registry import RuleRegistry, canonical_name, get_default_registry

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

__all__ = ("RuleParser", "parse_modifier", "parse_rules")

RuleSpec = Any
"""str | Callable | list[str | Callable | list] | None"""


def parse_modifier(token: str) -> tuple[str, Modifier | None]:
    """Split a leading modifier off a rule name.

    Returns:
        (canonical_name, modifier) e.g. "^startsWith" -> ("starts_with", Modifier.ABORT)
    """
    token = token.strip()
    if token.startswith(Modifier.ABORT.value):
        return canonical_name(token[1:]), Modifier.ABORT
    return canonical_name(token), None


class RuleParser:
    """Parse rule specs against one registry.

    String specs are cached (LRU, `config.parse_cache_size` entries). The
    cache is dropped whenever the registry version changes, so a rule
    redefined with define_rule is picked up by the next parse.
    """

    def __init__(
        self,
        registry: RuleRegistry | None = None,
        config: ValidatorConfig | None = None,
    ) -> None:
        self._registry = registry
        self.config = config or DEFAULT_CONFIG
        self._cache: OrderedDict[str, tuple[ParsedRule, ...]] = OrderedDict()
        self._cache_version = -1
        self._lock = threading.Lock()

    @property
    def registry(self) -> RuleRegistry:
        return get_default_registry() if self._registry is None else self._registry

    def parse(self, spec: RuleSpec) -> list[ParsedRule]:
        """Parse any accepted spec form into an ordered rule chain.

        Raises:
            UnknownRuleError: A rule name is not registered.
            RuleParseError: Malformed spec or rule arguments.
        """
        if spec is None:
            return []
        if isinstance(spec, str):
            return self._parse_string(spec)
        if isinstance(spec, (list, tuple)):
            return self._parse_list(spec)
        if callable(spec):
            return [ParsedRule(spec, (), None, None)]
        raise RuleParseError(
            f"Unsupported rule spec type {type(spec).__name__}",
            details={"spec": repr(spec)},
        )

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _parse_string(self, spec: str) -> list[ParsedRule]:
        size = self.config.parse_cache_size
        if size == 0:
            return self._parse_list(spec.split("|"))

        version = self.registry.version
        with self._lock:
            if self._cache_version != version:
                self._cache.clear()
                self._cache_version = version
            cached = self._cache.get(spec)
            if cached is not None:
                self._cache.move_to_end(spec)
                logger.debug("rule spec cache hit: %s", spec)
                return list(cached)

        chain = self._parse_list(spec.split("|"))
        with self._lock:
            if self._cache_version == version:
                self._cache[spec] = tuple(chain)
                if len(self._cache) > size:
                    self._cache.popitem(last=False)
        return chain

    def _parse_list(self, items: list[Any] | tuple[Any, ...]) -> list[ParsedRule]:
        chain: list[ParsedRule] = []
        for item in items:
            parsed = self._parse_rule(item)
            if parsed is not None:
                chain.append(parsed)
        return chain

    def _parse_rule(self, item: Any) -> ParsedRule | None:
        match item:
            case None | "" | [] | ():
                return None
            case str():
                if not item.strip():
                    return None
                name_part, sep, arg_part = item.partition(":")
                args = tuple(arg_part.split(",")) if sep else ()
                return self._bind(name_part, args, token=name_part.strip())
            case [head, *rest]:
                args = tuple(rest)
                if callable(head):
                    return self._bind_callable(head, args)
                if isinstance(head, str):
                    return self._bind(head, args, token=head)
                raise RuleParseError(
                    f"Invalid rule reference {head!r}",
                    details={"rule": repr(item)},
                )
            case _ if callable(item):
                return ParsedRule(item, (), None, None)
            case _:
                raise RuleParseError(
                    f"Unsupported rule element {item!r}",
                    details={"rule": repr(item)},
                )

    def _bind(self, name_part: str, args: tuple[Any, ...], token: str) -> ParsedRule:
        name, modifier = parse_modifier(name_part)
        config = self.registry.lookup(name) if name else None
        if config is None:
            raise UnknownRuleError(token)
        try:
            predicate = config.generator(args)
        except FieldRulesError:
            raise
        except Exception as e:
            raise RuleParseError(
                f"Rule {name} rejected its arguments",
                details={"rule": name, "args": list(args)},
                cause=e,
            ) from e
        return ParsedRule(predicate, args, name, modifier)

    def _bind_callable(self, generator: Callable[..., Any], args: tuple[Any, ...]) -> ParsedRule:
        try:
            predicate = generator(args)
        except Exception as e:
            raise RuleParseError(
                "Rule generator rejected its arguments",
                details={"generator": repr(generator), "args": list(args)},
                cause=e,
            ) from e
        return ParsedRule(predicate, args, None, None)


_default_parsers: weakref.WeakKeyDictionary[RuleRegistry, RuleParser] = (
    weakref.WeakKeyDictionary()
)


def parse_rules(
    spec: RuleSpec,
    registry: RuleRegistry | None = None,
    config: ValidatorConfig | None = None,
) -> list[ParsedRule]:
    """Parse a rule spec into an ordered list of ParsedRule.

    Args:
        spec: "required|between:1,10", a list of rules, a callable, or None.
        registry: Registry to resolve names against. Default: process-wide.
        config: Parser configuration (cache size).

    Raises:
        UnknownRuleError: A rule name is not registered.
        RuleParseError: Malformed spec or rule arguments.
    """
    if config is not None:
        return RuleParser(registry, config).parse(spec)
    target = get_default_registry() if registry is None else registry
    parser = _default_parsers.get(target)
    if parser is None:
        parser = RuleParser(target)
        _default_parsers[target] = parser
    return parser.parse(spec)
