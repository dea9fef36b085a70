"""Unit tests for the name to type registry.

Test Coverage:
1. Registration and lookup on explicit registries
2. Duplicate handling (strict vs. replacing)
3. The @state_type decorator
4. Module-level default registry functions
"""

import logging

import pytest

from modelgraph import registry
from modelgraph.model_exceptions import (
    TypeAlreadyRegisteredError,
    TypeNotRegisteredError,
    UnresolvedTypeError,
)
from modelgraph.registry import TypeRegistry, state_type


class LoginPage:
    pass


class OtherLoginPage:
    pass


# ============================================================================
# Test: Explicit registries
# ============================================================================


def test_register_and_lookup(type_registry):
    assert type_registry.register_type(LoginPage) is LoginPage
    assert type_registry.lookup_type_by_name("LoginPage") is LoginPage
    assert type_registry.has_type("LoginPage")
    assert "LoginPage" in type_registry
    assert len(type_registry) == 1


def test_register_under_explicit_name(type_registry):
    type_registry.register_type(LoginPage, name="Login")
    assert type_registry.lookup_type_by_name("Login") is LoginPage
    assert not type_registry.has_type("LoginPage")


def test_lookup_unknown_name(type_registry):
    type_registry.register_type(LoginPage)
    with pytest.raises(TypeNotRegisteredError) as exc_info:
        type_registry.lookup_type_by_name("Dashboard")

    error = exc_info.value
    assert isinstance(error, UnresolvedTypeError)
    assert error.error_code == "TYPE_NOT_REGISTERED"
    assert error.context["registered"] == ["LoginPage"]


def test_reregistering_same_class_is_idempotent(type_registry):
    type_registry.register_type(LoginPage)
    type_registry.register_type(LoginPage)
    assert type_registry.list_type_names() == ["LoginPage"]


def test_strict_registry_rejects_duplicate_name(type_registry):
    type_registry.register_type(LoginPage, name="Login")
    with pytest.raises(TypeAlreadyRegisteredError) as exc_info:
        type_registry.register_type(OtherLoginPage, name="Login")

    assert exc_info.value.error_code == "TYPE_EXISTS"
    assert type_registry.lookup_type_by_name("Login") is LoginPage


def test_lenient_registry_replaces_with_warning(caplog):
    lenient = TypeRegistry(strict=False)
    lenient.register_type(LoginPage, name="Login")

    with caplog.at_level(logging.WARNING, logger="modelgraph.registry"):
        lenient.register_type(OtherLoginPage, name="Login")

    assert lenient.lookup_type_by_name("Login") is OtherLoginPage
    assert any("already registered" in r.getMessage() for r in caplog.records)


def test_strictness_follows_settings(monkeypatch):
    from modelgraph.config import reset_settings

    monkeypatch.setenv("MODELGRAPH_STRICT_TYPE_REGISTRY", "true")
    reset_settings()

    from_settings = TypeRegistry()
    from_settings.register_type(LoginPage, name="Login")
    with pytest.raises(TypeAlreadyRegisteredError):
        from_settings.register_type(OtherLoginPage, name="Login")


def test_unregister_and_clear(type_registry):
    type_registry.register_type(LoginPage)
    type_registry.register_type(OtherLoginPage)

    assert type_registry.unregister_type("LoginPage") is True
    assert type_registry.unregister_type("LoginPage") is False
    assert type_registry.list_type_names() == ["OtherLoginPage"]

    type_registry.clear()
    assert len(type_registry) == 0


def test_empty_registry_is_still_used_by_transitions(type_registry):
    """An empty registry is falsy but must not be swapped for the default one."""
    from modelgraph import Transition

    registry.register_type(LoginPage, name="Login")
    transition = Transition(registry=type_registry)
    transition.set_target_name("Login")

    with pytest.raises(TypeNotRegisteredError):
        transition.resolve_target_type()


# ============================================================================
# Test: @state_type decorator
# ============================================================================


def test_state_type_bare_decorator():
    @state_type
    class Dashboard:
        pass

    assert registry.lookup_type_by_name("Dashboard") is Dashboard


def test_state_type_with_arguments(type_registry):
    @state_type(name="Checkout", registry=type_registry)
    class CheckoutPage:
        pass

    assert type_registry.lookup_type_by_name("Checkout") is CheckoutPage
    assert not registry.get_default_registry().has_type("Checkout")


# ============================================================================
# Test: Default registry functions
# ============================================================================


def test_default_registry_functions():
    registry.register_type(LoginPage)
    assert registry.lookup_type_by_name("LoginPage") is LoginPage
    assert registry.get_default_registry().list_type_names() == ["LoginPage"]

    registry.clear_types()
    with pytest.raises(TypeNotRegisteredError):
        registry.lookup_type_by_name("LoginPage")
