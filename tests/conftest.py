"""Pytest configuration and fixtures."""

from dataclasses import dataclass

import pytest

from modelgraph.config import reset_settings
from modelgraph.logging import get_logger, setup_logging
from modelgraph.registry import TypeRegistry, clear_types


@dataclass
class CounterState:
    """Minimal current-state object for guard and action tests."""

    value: int


@pytest.fixture(scope="session", autouse=True)
def quiet_logging():
    """Initialize logging once, before any test installs capture handlers."""
    get_logger(__name__)
    setup_logging(level="WARNING", structured=False, console=False)


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Reset settings and the default type registry around every test."""
    monkeypatch.delenv("MODELGRAPH_ENV", raising=False)
    monkeypatch.delenv("MODELGRAPH_STRICT_TYPE_REGISTRY", raising=False)
    reset_settings()
    clear_types()
    yield
    clear_types()
    reset_settings()


@pytest.fixture
def state_factory():
    """Build current-state objects with a given value."""
    return CounterState


@pytest.fixture
def type_registry():
    """Provide an empty, strict registry independent of the default one."""
    return TypeRegistry(strict=True)
