# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Core primitives: evaluation contexts and rule types."""

from .context import ErrorContext, ValidateContext, resolver_from_mapping
from .types import AsyncPredicate, Generator, Modifier, ParsedRule, Verdict

__all__ = (
    "AsyncPredicate",
    "ErrorContext",
    "Generator",
    "Modifier",
    "ParsedRule",
    "ValidateContext",
    "Verdict",
    "resolver_from_mapping",
)
