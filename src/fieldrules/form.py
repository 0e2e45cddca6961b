# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""FormValidator - validate records against a {field: rule spec} schema.

The schema is parsed once, at construction, so a misconfigured schema fails
loudly before any value is checked. Each field's chain runs in source
order; different fields run concurrently.

Example:
    validator = FormValidator({
        "email": "required|email",
        "password": "required|len:8,64",
        "password_confirm": "confirm",
        "nickname": "optional|alphanumeric",
    })
    report = await validator.validate(form_values, locale="zh")
    if not report.valid:
        return report.errors   # {"email": ["..."], ...}

Cancellation is the caller's concern:

    with anyio.fail_after(2):
        report = await validator.validate(values)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import anyio

from fieldrules.config import DEFAULT_CONFIG, ValidatorConfig
from fieldrules.core.context import ValidateContext, resolver_from_mapping
from fieldrules.core.types import ParsedRule
from fieldrules.rules.evaluator import FieldReport, validate_field
from fieldrules.rules.parser import RuleParser, RuleSpec
from fieldrules.rules.registry import RuleRegistry, get_default_registry

__all__ = ("FormReport", "FormValidator", "validate_form")


@dataclass(slots=True)
class FormReport:
    """Per-field reports for one record, in schema order."""

    fields: dict[str, FieldReport] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return all(report.valid for report in self.fields.values())

    @property
    def errors(self) -> dict[str, list[str]]:
        """Failed fields only: name -> messages."""
        return {
            name: list(report.errors)
            for name, report in self.fields.items()
            if not report.valid
        }

    def __getitem__(self, name: str) -> FieldReport:
        return self.fields[name]

    def to_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "fields": {name: report.to_dict() for name, report in self.fields.items()},
        }


class FormValidator:
    """Parsed schema bound to a registry, reusable across many records.

    Attributes:
        chains: Field name -> parsed rule chain.
        registry: Registry used for parsing and messages.
        config: Engine configuration.
    """

    def __init__(
        self,
        schema: Mapping[str, RuleSpec],
        *,
        registry: RuleRegistry | None = None,
        config: ValidatorConfig | None = None,
    ) -> None:
        """Parse every field's spec.

        Raises:
            UnknownRuleError: A spec names an unregistered rule.
            RuleParseError: A spec is malformed.
        """
        self.registry = get_default_registry() if registry is None else registry
        self.config = config or DEFAULT_CONFIG
        parser = RuleParser(self.registry, self.config)
        self.chains: dict[str, list[ParsedRule]] = {
            name: parser.parse(spec) for name, spec in schema.items()
        }

    @property
    def field_names(self) -> list[str]:
        return list(self.chains)

    async def validate_field(
        self,
        name: str,
        values: Mapping[str, Any],
        *,
        locale: str | None = None,
    ) -> FieldReport:
        """Validate a single field of `values`. Raises KeyError if unknown."""
        chain = self.chains[name]
        ctx = ValidateContext(
            name=name,
            value=values.get(name),
            get_value=resolver_from_mapping(values),
        )
        return await validate_field(
            chain,
            ctx,
            registry=self.registry,
            config=self.config,
            locale=locale,
        )

    async def validate(
        self,
        values: Mapping[str, Any],
        *,
        locale: str | None = None,
    ) -> FormReport:
        """Validate every schema field of one record concurrently.

        Raises:
            ExceptionGroup: With `raise_on_predicate_error`, predicate
                exceptions surface grouped by the task group. Use
                `validate_field` to get a single field's exception unwrapped.
        """
        reports: dict[str, FieldReport] = {}

        async def run(name: str) -> None:
            reports[name] = await self.validate_field(name, values, locale=locale)

        async with anyio.create_task_group() as tg:
            for name in self.chains:
                tg.start_soon(run, name)

        return FormReport(fields={name: reports[name] for name in self.chains})

    async def validate_many(
        self,
        rows: Iterable[Mapping[str, Any]],
        *,
        locale: str | None = None,
    ) -> list[FormReport]:
        """Validate many records with the same parsed schema, in order."""
        return [await self.validate(row, locale=locale) for row in rows]


async def validate_form(
    schema: Mapping[str, RuleSpec],
    values: Mapping[str, Any],
    *,
    registry: RuleRegistry | None = None,
    config: ValidatorConfig | None = None,
    locale: str | None = None,
) -> FormReport:
    """Parse `schema` and validate one record."""
    validator = FormValidator(schema, registry=registry, config=config)
    return await validator.validate(values, locale=locale)
