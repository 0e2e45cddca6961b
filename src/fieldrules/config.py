# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

"""Engine configuration."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

__all__ = ("DEFAULT_CONFIG", "ValidatorConfig")


class ValidatorConfig(BaseModel):
    """Configuration for parsing and evaluating rule chains.

    Attributes:
        locale: Requested message locale (e.g. "zh"). None uses fallback only.
        fallback_locale: Message key tried when the locale has no entry.
        parse_cache_size: Max cached string specs per parser. 0 disables.
        raise_on_predicate_error: Propagate predicate exceptions instead of
            recording a failure.
        stop_on_first_failure: Treat every rule as if prefixed with '^'.
    """

    model_config = ConfigDict(frozen=True)

    locale: str | None = Field(default=None)
    fallback_locale: str = Field(default="_")
    parse_cache_size: int = Field(default=256, ge=0)
    raise_on_predicate_error: bool = Field(default=False)
    stop_on_first_failure: bool = Field(default=False)


DEFAULT_CONFIG = ValidatorConfig()
