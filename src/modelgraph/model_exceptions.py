"""Model definition exceptions.

This module contains the exceptions raised while a state graph is being
defined: transitions wired without the closures they need, target types
that cannot be resolved, and malformed contexts. They all signal a
model-authoring mistake and are never recovered internally.
"""

from typing import Any

from .base_exceptions import ModelGraphException


class ModelDefinitionError(ModelGraphException):
    """Base exception for model-definition errors."""

    pass


class MissingBlockError(ModelDefinitionError):
    """Raised when a registration call is made without a callable."""

    def __init__(self, operation: str, received: Any = None, **kwargs) -> None:
        """Initialize with the registration operation that was called."""
        super().__init__(
            f"'{operation}' requires a callable, got {received!r}",
            error_code="MISSING_BLOCK",
            context={"operation": operation, "received": received, **kwargs},
        )
        self.operation = operation


class AlreadyLoadedError(ModelDefinitionError):
    """Raised when a loader or identifier is set after the target type was loaded."""

    def __init__(self, operation: str, **kwargs) -> None:
        """Initialize with the operation that was rejected."""
        super().__init__(
            f"Cannot call '{operation}': target type is already loaded",
            error_code="ALREADY_LOADED",
            context={"operation": operation, **kwargs},
        )
        self.operation = operation


class UnresolvedTypeError(ModelDefinitionError):
    """Raised when a target type cannot be loaded or identified."""

    def __init__(self, reason: str, error_code: str = "UNRESOLVED_TYPE", **kwargs) -> None:
        """Initialize with the reason resolution failed."""
        super().__init__(
            f"Target type could not be resolved: {reason}",
            error_code=error_code,
            context={"reason": reason, **kwargs},
        )
        self.reason = reason


class TypeNotRegisteredError(UnresolvedTypeError):
    """Raised when a type name has no entry in the type registry."""

    def __init__(self, type_name: str, **kwargs) -> None:
        """Initialize with the missing type name."""
        super().__init__(
            f"no type registered under '{type_name}'",
            error_code="TYPE_NOT_REGISTERED",
            type_name=type_name,
            **kwargs,
        )
        self.type_name = type_name


class TypeAlreadyRegisteredError(ModelDefinitionError):
    """Raised when a strict registry receives a second type for the same name."""

    def __init__(self, type_name: str, **kwargs) -> None:
        """Initialize with the duplicated type name."""
        super().__init__(
            f"Type '{type_name}' already registered",
            error_code="TYPE_EXISTS",
            context={"type_name": type_name, **kwargs},
        )
        self.type_name = type_name


class ContextError(ModelDefinitionError):
    """Base exception for context registration errors."""

    pass


class InvalidContextError(ContextError):
    """Raised when a context registration contains something other than a Context."""

    def __init__(self, name: Any, reason: str, **kwargs) -> None:
        """Initialize with the offending entry name."""
        super().__init__(
            f"Invalid context '{name}': {reason}",
            error_code="INVALID_CONTEXT",
            context={"name": name, "reason": reason, **kwargs},
        )
        self.name = name


class TypeMismatchError(ContextError):
    """Raised when contexts are not supplied as a name to Context mapping."""

    def __init__(self, expected: str, received: Any, **kwargs) -> None:
        """Initialize with expected and received kinds."""
        received_type = type(received).__name__
        super().__init__(
            f"Expected {expected}, got {received_type}",
            error_code="TYPE_MISMATCH",
            context={"expected": expected, "received_type": received_type, **kwargs},
        )
