# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Rules module: rule registry, rule-spec parser and chain evaluation.

Core exports:
- RuleConfig, RuleRegistry: Rule definitions keyed by canonical name
- define_rule, rule: Register extensions (override logs a warning)
- parse_rules, RuleParser: "required|between:1,10" -> list[ParsedRule]
- evaluate_rules, validate_field: Run a chain against a ValidateContext
- resolve_error_message: Locale-aware message for a failed rule
"""

from fieldrules.errors import RuleParseError, SkipRemaining, UnknownRuleError

from .evaluator import FieldReport, RuleResult, evaluate_rules, run_rule, validate_field
from .messages import resolve_error_message
from .parser import RuleParser, parse_modifier, parse_rules
from .registry import (
    RuleConfig,
    RuleRegistry,
    canonical_name,
    define_rule,
    get_default_registry,
    print_rules_usage,
    reset_default_registry,
    rule,
)

__all__ = (
    # Registry
    "RuleConfig",
    "RuleRegistry",
    "canonical_name",
    "define_rule",
    "get_default_registry",
    "print_rules_usage",
    "reset_default_registry",
    "rule",
    # Parser
    "RuleParser",
    "RuleParseError",
    "UnknownRuleError",
    "parse_modifier",
    "parse_rules",
    # Evaluation
    "FieldReport",
    "RuleResult",
    "SkipRemaining",
    "evaluate_rules",
    "resolve_error_message",
    "run_rule",
    "validate_field",
)
