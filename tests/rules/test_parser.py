# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Tests for fieldrules.rules.parser - rule spec parsing."""

from __future__ import annotations

import pytest

from fieldrules.config import ValidatorConfig
from fieldrules.core.context import ValidateContext
from fieldrules.core.types import Modifier, ParsedRule
from fieldrules.errors import RuleParseError, UnknownRuleError
from fieldrules.rules.evaluator import evaluate_rules
from fieldrules.rules.parser import RuleParser, parse_modifier, parse_rules
from fieldrules.rules.registry import (
    RuleConfig,
    RuleRegistry,
    define_rule,
    get_default_registry,
)


def _shape(chain: list[ParsedRule]) -> list[tuple]:
    return [(r.name, r.params, r.modifier) for r in chain]


def _always(result: bool):
    def generator(args):
        async def predicate(ctx):
            return result

        return predicate

    return generator


# =============================================================================
# Tests: parse_modifier
# =============================================================================


class TestParseModifier:
    def test_plain_name(self):
        assert parse_modifier("email") == ("email", None)

    def test_abort_modifier(self):
        assert parse_modifier("^min") == ("min", Modifier.ABORT)

    def test_name_is_canonicalized(self):
        assert parse_modifier(" ^startsWith ") == ("starts_with", Modifier.ABORT)


# =============================================================================
# Tests: string specs
# =============================================================================


class TestStringSpecs:
    """Tests for the "rule:arg,arg|rule" grammar."""

    def test_names_and_args(self):
        """Names, args and order are preserved."""
        chain = parse_rules("required|between:1,10|^email")
        assert _shape(chain) == [
            ("required", (), None),
            ("between", ("1", "10"), None),
            ("email", (), Modifier.ABORT),
        ]

    def test_args_split_on_first_colon_only(self):
        chain = parse_rules("after:2022-01-01T10:00:00")
        assert chain[0].params == ("2022-01-01T10:00:00",)

    def test_empty_segments_are_skipped(self):
        assert _shape(parse_rules("required||email|")) == [
            ("required", (), None),
            ("email", (), None),
        ]

    def test_empty_and_none_specs(self):
        assert parse_rules("") == []
        assert parse_rules(None) == []

    def test_empty_arg_list(self):
        """'rule:' binds one empty-string arg."""
        chain = parse_rules("in:")
        assert chain[0].params == ("",)

    def test_naive_comma_split(self):
        """Commas inside an argument are not protected."""
        chain = parse_rules("matches:/\\d{1,3}/")
        assert chain[0].params == ("/\\d{1", "3}/")

    def test_camel_case_name(self):
        chain = parse_rules("startsWith:ab")
        assert chain[0].name == "starts_with"

    def test_unknown_rule_raises(self):
        """Unknown rule names fail at parse time."""
        with pytest.raises(UnknownRuleError, match="Unknown validation rule frobnicate") as exc:
            parse_rules("frobnicate")
        assert exc.value.rule == "frobnicate"
        assert isinstance(exc.value, RuleParseError)

    def test_unknown_rule_anywhere_in_chain(self):
        with pytest.raises(UnknownRuleError):
            parse_rules("required|email|frobnicate:1")

    def test_bare_modifier_is_unknown(self):
        with pytest.raises(UnknownRuleError):
            parse_rules("^")

    def test_generator_errors_surface_at_parse(self):
        with pytest.raises(RuleParseError, match="len param error"):
            parse_rules("len:")

    def test_parse_is_deterministic(self):
        """Parsing the same spec twice yields the same chain shape."""
        spec = "required|^len:4,10|in:a,b"
        assert _shape(parse_rules(spec)) == _shape(parse_rules(spec))
        parser = RuleParser(get_default_registry(), ValidatorConfig(parse_cache_size=0))
        assert _shape(parser.parse(spec)) == _shape(parse_rules(spec))


# =============================================================================
# Tests: list and callable specs
# =============================================================================


class TestListSpecs:
    """Tests for list, tuple and callable specs."""

    def test_mixed_list(self):
        async def custom(ctx):
            return True

        chain = parse_rules(["required", ["between", 1, 10], custom])
        assert _shape(chain) == [
            ("required", (), None),
            ("between", (1, 10), None),
            (None, (), None),
        ]
        assert chain[2].predicate is custom

    def test_list_element_strings_take_args(self):
        chain = parse_rules(["len:2,4", "^email"])
        assert _shape(chain) == [
            ("len", ("2", "4"), None),
            ("email", (), Modifier.ABORT),
        ]

    def test_list_head_with_modifier(self):
        chain = parse_rules([["^min", 3]])
        assert _shape(chain) == [("min", (3,), Modifier.ABORT)]

    def test_callable_head_is_generator(self):
        seen = []

        def generator(args):
            seen.append(args)

            async def predicate(ctx):
                return ctx.value in args

            return predicate

        chain = parse_rules([[generator, "a", "b"]])
        assert seen == [("a", "b")]
        assert chain[0].params == ("a", "b")
        assert chain[0].name is None

    def test_callable_spec(self):
        async def custom(ctx):
            return True

        assert parse_rules(custom) == [ParsedRule(custom, (), None, None)]

    def test_empty_elements_skipped(self):
        assert _shape(parse_rules(["", None, [], "email"])) == [("email", (), None)]

    def test_unsupported_element_raises(self):
        with pytest.raises(RuleParseError):
            parse_rules(["required", 42])

    def test_unsupported_list_head_raises(self):
        with pytest.raises(RuleParseError):
            parse_rules([[42, "a"]])

    def test_unsupported_spec_type_raises(self):
        with pytest.raises(RuleParseError, match="Unsupported rule spec type"):
            parse_rules(3.14)

    def test_failing_generator_is_wrapped(self):
        def broken(args):
            raise ValueError("bad args")

        with pytest.raises(RuleParseError) as exc:
            parse_rules([[broken, 1]])
        assert isinstance(exc.value.cause, ValueError)


# =============================================================================
# Tests: registry binding and caching
# =============================================================================


class TestRegistryBinding:
    """Tests for registry resolution and the parse cache."""

    def test_custom_registry(self):
        registry = RuleRegistry({"yes": RuleConfig(generator=_always(True))})
        assert _shape(parse_rules("yes", registry=registry)) == [("yes", (), None)]
        with pytest.raises(UnknownRuleError):
            parse_rules("email", registry=registry)

    def test_empty_registry_is_not_replaced_by_default(self):
        with pytest.raises(UnknownRuleError):
            parse_rules("email", registry=RuleRegistry())

    def test_cached_chain_reused(self):
        parser = RuleParser(get_default_registry())
        first = parser.parse("required|email")
        second = parser.parse("required|email")
        assert first == second
        assert first is not second

    @pytest.mark.anyio
    async def test_redefined_rule_invalidates_cache(self):
        """A rule redefined after parsing is used by the next parse."""
        ctx = ValidateContext(name="f", value="not-an-email")
        results = await evaluate_rules(parse_rules("email"), ctx)
        assert not results[0].passed

        define_rule("email", RuleConfig(generator=_always(True)))
        results = await evaluate_rules(parse_rules("email"), ctx)
        assert results[0].passed

    def test_cache_bounded(self):
        parser = RuleParser(get_default_registry(), ValidatorConfig(parse_cache_size=2))
        for spec in ("email", "required", "number"):
            parser.parse(spec)
        assert len(parser._cache) == 2
        assert "email" not in parser._cache

    def test_clear_cache(self):
        parser = RuleParser()
        parser.parse("email")
        parser.clear_cache()
        assert len(parser._cache) == 0
