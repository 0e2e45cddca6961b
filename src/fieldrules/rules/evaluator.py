# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Evaluate a parsed rule chain against one field.

Rules run in source order. A chain stops early when:
- a rule raises SkipRemaining (the `optional` rule on a blank value); the
  field counts as valid, or
- a rule marked '^' fails (or any rule, with stop_on_first_failure).

Predicates never signal failure by raising. Any other exception is logged
and recorded as a failure, unless raise_on_predicate_error is set.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from fieldrules.config import DEFAULT_CONFIG, ValidatorConfig
from fieldrules.core.context import ValidateContext
from fieldrules.core.types import ParsedRule, Verdict
from fieldrules.errors import SkipRemaining

from .messages import resolve_error_message
from .registry import RuleRegistry, get_default_registry

logger = logging.getLogger(__name__)

__all__ = ("FieldReport", "RuleResult", "evaluate_rules", "run_rule", "validate_field")


@dataclass(frozen=True, slots=True)
class RuleResult:
    """Outcome of one rule in a chain.

    Attributes:
        name: Canonical rule name (None for bare callables).
        verdict: PASS, FAIL or SKIP_REMAINING.
        params: Static args of the rule.
        error: Exception raised by the predicate, if it failed closed.
    """

    name: str | None
    verdict: Verdict
    params: tuple[Any, ...] = ()
    error: BaseException | None = field(default=None, compare=False)

    @property
    def passed(self) -> bool:
        return self.verdict is not Verdict.FAIL


@dataclass(slots=True)
class FieldReport:
    """Aggregated outcome for one field."""

    name: str
    value: Any
    results: list[RuleResult] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return all(r.passed for r in self.results)

    @property
    def skipped(self) -> bool:
        """True if the chain was cut short by SkipRemaining."""
        return any(r.verdict is Verdict.SKIP_REMAINING for r in self.results)

    @property
    def first_error(self) -> str | None:
        return self.errors[0] if self.errors else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "valid": self.valid,
            "skipped": self.skipped,
            "results": [(r.name, r.verdict.value) for r in self.results],
            "errors": list(self.errors),
        }


async def run_rule(
    rule: ParsedRule,
    ctx: ValidateContext,
    config: ValidatorConfig = DEFAULT_CONFIG,
) -> RuleResult:
    """Invoke one parsed rule and map its outcome to a Verdict."""
    try:
        outcome = rule.predicate(ctx)
        if inspect.isawaitable(outcome):
            outcome = await outcome
    except SkipRemaining:
        return RuleResult(rule.name, Verdict.SKIP_REMAINING, rule.params)
    except Exception as e:
        if config.raise_on_predicate_error:
            raise
        logger.exception(f"Rule '{rule.name}' raised on field '{ctx.name}': {e}")
        return RuleResult(rule.name, Verdict.FAIL, rule.params, error=e)

    if not isinstance(outcome, bool):
        logger.warning(
            "Rule '%s' returned non-bool %r on field '%s'; counted as failure",
            rule.name,
            outcome,
            ctx.name,
        )
        return RuleResult(rule.name, Verdict.FAIL, rule.params)
    return RuleResult(rule.name, Verdict.PASS if outcome else Verdict.FAIL, rule.params)


async def evaluate_rules(
    rules: Iterable[ParsedRule],
    ctx: ValidateContext,
    config: ValidatorConfig = DEFAULT_CONFIG,
) -> list[RuleResult]:
    """Run a chain in order and return one result per rule that ran."""
    results: list[RuleResult] = []
    for rule in rules:
        result = await run_rule(rule, ctx, config)
        results.append(result)
        if result.verdict is Verdict.SKIP_REMAINING:
            break
        if result.verdict is Verdict.FAIL and (
            rule.aborts_on_failure or config.stop_on_first_failure
        ):
            break
    return results


async def validate_field(
    rules: Iterable[ParsedRule],
    ctx: ValidateContext,
    *,
    registry: RuleRegistry | None = None,
    config: ValidatorConfig = DEFAULT_CONFIG,
    locale: str | None = None,
) -> FieldReport:
    """Evaluate a chain and render messages for the failures.

    Args:
        rules: Parsed chain for the field.
        ctx: Field context.
        registry: Registry providing error_msg templates.
        config: Engine configuration.
        locale: Message locale; overrides config.locale.
    """
    results = await evaluate_rules(rules, ctx, config)
    target = get_default_registry() if registry is None else registry
    report = FieldReport(name=ctx.name, value=ctx.value, results=results)

    for result in results:
        if result.passed:
            continue
        rule_config = target.lookup(result.name) if result.name else None
        report.errors.append(
            resolve_error_message(
                rule_config,
                ctx.with_params(result.params),
                rule=result.name,
                locale=locale or config.locale,
                fallback_locale=config.fallback_locale,
            )
        )
    return report
