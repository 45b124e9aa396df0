"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from recordproto import SchemaRegistry


@pytest.fixture
def registry() -> SchemaRegistry:
    """Empty registry, isolated from the global one."""
    return SchemaRegistry()
