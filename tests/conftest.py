# Copyright (c) 2025 - 2026, HaiyangLi <quantocean.li at gmail dot com>
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import pytest

from fieldrules.rules.registry import reset_default_registry


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def fresh_default_registry():
    """Each test starts from a registry holding only the built-ins."""
    reset_default_registry()
    yield
    reset_default_registry()
