"""Name to type registry for state types.

Transitions that know their target only by name resolve it through this
registry instead of through dynamic symbol lookup. State types are
registered at model-load time, either explicitly or with the
``@state_type`` decorator, and looked up lazily when a transition first
needs its target.

THREAD SAFETY:
==============
All operations on a TypeRegistry are protected by an internal RLock.
Registration is expected to happen once at model-load time; lookups may
happen from any thread afterwards.

Example Usage:
==============
    from modelgraph import registry

    @registry.state_type
    class LoginPage:
        ...

    registry.lookup_type_by_name("LoginPage")  # -> LoginPage
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TypeVar, overload

from .config import get_settings
from .model_exceptions import TypeAlreadyRegisteredError, TypeNotRegisteredError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)


@dataclass
class TypeRegistry:
    """Registry mapping type names to state types.

    A name maps to at most one type. Registering a different type under a
    known name replaces it with a warning, or raises
    TypeAlreadyRegisteredError when ``strict`` is set (defaulting to the
    ``strict_type_registry`` setting).
    """

    strict: bool | None = None

    _types: dict[str, type] = field(default_factory=dict, init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    def _is_strict(self) -> bool:
        if self.strict is not None:
            return self.strict
        return get_settings().strict_type_registry

    def register_type(self, cls: T, name: str | None = None) -> T:
        """Register a type under a name.

        Args:
            cls: The type to register
            name: Registry name, defaults to ``cls.__name__``

        Returns:
            The registered type, so this can be used as a decorator

        Raises:
            TypeAlreadyRegisteredError: If strict and the name maps to another type
        """
        type_name = name or cls.__name__

        with self._lock:
            existing = self._types.get(type_name)
            if existing is cls:
                logger.debug(f"Type {type_name} already registered (same class)")
                return cls

            if existing is not None:
                if self._is_strict():
                    raise TypeAlreadyRegisteredError(
                        type_name, existing_class=existing, new_class=cls
                    )
                logger.warning(
                    f"Type '{type_name}' already registered to {existing!r}, replacing with {cls!r}"
                )

            self._types[type_name] = cls
            logger.debug(f"Registered type: {type_name}")

        return cls

    def lookup_type_by_name(self, name: str) -> type:
        """Look up a registered type.

        Args:
            name: Registry name

        Returns:
            The registered type

        Raises:
            TypeNotRegisteredError: If nothing is registered under ``name``
        """
        with self._lock:
            try:
                return self._types[name]
            except KeyError:
                raise TypeNotRegisteredError(
                    name, registered=sorted(self._types)
                ) from None

    def has_type(self, name: str) -> bool:
        with self._lock:
            return name in self._types

    def unregister_type(self, name: str) -> bool:
        """Remove a type from the registry.

        Returns:
            True if a type was removed, False if the name was unknown
        """
        with self._lock:
            return self._types.pop(name, None) is not None

    def list_type_names(self) -> list[str]:
        with self._lock:
            return sorted(self._types)

    def clear(self) -> None:
        with self._lock:
            count = len(self._types)
            self._types.clear()
        if count:
            logger.debug(f"Cleared {count} registered types")

    def __len__(self) -> int:
        with self._lock:
            return len(self._types)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._types


# Global registry - private to this module
_default_registry = TypeRegistry()


def get_default_registry() -> TypeRegistry:
    """Get the process-wide registry used when none is given explicitly."""
    return _default_registry


def register_type(cls: T, name: str | None = None) -> T:
    """Register a type with the default registry."""
    return _default_registry.register_type(cls, name)


def lookup_type_by_name(name: str) -> type:
    """Look up a type in the default registry.

    Raises:
        TypeNotRegisteredError: If nothing is registered under ``name``
    """
    return _default_registry.lookup_type_by_name(name)


def clear_types() -> None:
    """Remove every type from the default registry (mainly for testing)."""
    _default_registry.clear()


@overload
def state_type(cls: T, *, name: str | None = ..., registry: TypeRegistry | None = ...) -> T: ...


@overload
def state_type(
    cls: None = ..., *, name: str | None = ..., registry: TypeRegistry | None = ...
) -> Callable[[T], T]: ...


def state_type(cls=None, *, name=None, registry=None):
    """Decorator registering a state type by name.

    Usage:
        @state_type
        class Dashboard:
            ...

        @state_type(name="Checkout", registry=my_registry)
        class CheckoutPage:
            ...

    Args:
        cls: The decorated class (when used without arguments)
        name: Registry name, defaults to the class name
        registry: Target registry, defaults to the process-wide registry

    Returns:
        The class unchanged, or a decorator when called with arguments
    """

    def decorator(target: T) -> T:
        target_registry = registry if registry is not None else _default_registry
        return target_registry.register_type(target, name)

    if cls is not None:
        return decorator(cls)
    return decorator
