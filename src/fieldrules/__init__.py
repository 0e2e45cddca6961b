# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""fieldrules - declarative, async field validation rules.

Rules are compact strings parsed once into bound async predicates:

    from fieldrules import ValidateContext, parse_rules, evaluate_rules

    chain = parse_rules("required|between:1,10")
    results = await evaluate_rules(chain, ValidateContext(name="qty", value="5"))
    assert all(r.passed for r in results)

Top-level re-exports for convenient imports:
- fieldrules.rules -> registry, parser, evaluator
- fieldrules.form -> FormValidator, validate_form
"""

from __future__ import annotations

from typing import TYPE_CHECKING

# Lazy import mapping: name -> (module, attribute)
_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    # config
    "ValidatorConfig": ("fieldrules.config", "ValidatorConfig"),
    # core
    "ErrorContext": ("fieldrules.core.context", "ErrorContext"),
    "ValidateContext": ("fieldrules.core.context", "ValidateContext"),
    "Modifier": ("fieldrules.core.types", "Modifier"),
    "ParsedRule": ("fieldrules.core.types", "ParsedRule"),
    "Verdict": ("fieldrules.core.types", "Verdict"),
    # errors
    "ConfigurationError": ("fieldrules.errors", "ConfigurationError"),
    "FieldRulesError": ("fieldrules.errors", "FieldRulesError"),
    "RuleParseError": ("fieldrules.errors", "RuleParseError"),
    "SkipRemaining": ("fieldrules.errors", "SkipRemaining"),
    "UnknownRuleError": ("fieldrules.errors", "UnknownRuleError"),
    # registry
    "RuleConfig": ("fieldrules.rules.registry", "RuleConfig"),
    "RuleRegistry": ("fieldrules.rules.registry", "RuleRegistry"),
    "define_rule": ("fieldrules.rules.registry", "define_rule"),
    "get_default_registry": ("fieldrules.rules.registry", "get_default_registry"),
    "print_rules_usage": ("fieldrules.rules.registry", "print_rules_usage"),
    "reset_default_registry": ("fieldrules.rules.registry", "reset_default_registry"),
    "rule": ("fieldrules.rules.registry", "rule"),
    # parser
    "RuleParser": ("fieldrules.rules.parser", "RuleParser"),
    "parse_rules": ("fieldrules.rules.parser", "parse_rules"),
    # evaluation
    "FieldReport": ("fieldrules.rules.evaluator", "FieldReport"),
    "RuleResult": ("fieldrules.rules.evaluator", "RuleResult"),
    "evaluate_rules": ("fieldrules.rules.evaluator", "evaluate_rules"),
    "validate_field": ("fieldrules.rules.evaluator", "validate_field"),
    "resolve_error_message": ("fieldrules.rules.messages", "resolve_error_message"),
    # form
    "FormReport": ("fieldrules.form", "FormReport"),
    "FormValidator": ("fieldrules.form", "FormValidator"),
    "validate_form": ("fieldrules.form", "validate_form"),
}

_LOADED: dict[str, object] = {}


def __getattr__(name: str) -> object:
    """Lazy import attributes on first access."""
    if name in _LOADED:
        return _LOADED[name]

    if name in _LAZY_IMPORTS:
        from importlib import import_module

        module_name, attr_name = _LAZY_IMPORTS[name]
        module = import_module(module_name)
        value = getattr(module, attr_name)
        _LOADED[name] = value
        return value

    raise AttributeError(f"module 'fieldrules' has no attribute {name!r}")


def __dir__() -> list[str]:
    """List available attributes."""
    return list(_LAZY_IMPORTS.keys())


__all__ = tuple(_LAZY_IMPORTS)

if TYPE_CHECKING:
    from fieldrules.config import ValidatorConfig
    from fieldrules.core.context import ErrorContext, ValidateContext
    from fieldrules.core.types import Modifier, ParsedRule, Verdict
    from fieldrules.errors import (
        ConfigurationError,
        FieldRulesError,
        RuleParseError,
        SkipRemaining,
        UnknownRuleError,
    )
    from fieldrules.form import FormReport, FormValidator, validate_form
    from fieldrules.rules.evaluator import (
        FieldReport,
        RuleResult,
        evaluate_rules,
        validate_field,
    )
    from fieldrules.rules.messages import resolve_error_message
    from fieldrules.rules.parser import RuleParser, parse_rules
    from fieldrules.rules.registry import (
        RuleConfig,
        RuleRegistry,
        define_rule,
        get_default_registry,
        print_rules_usage,
        reset_default_registry,
        rule,
    )
