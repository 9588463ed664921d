"""Shared fixtures for modresolve tests."""

import pytest

from modresolve.core.module import TableModuleRegistry


@pytest.fixture
def registry() -> TableModuleRegistry:
    """An empty in-memory module registry."""
    return TableModuleRegistry()
