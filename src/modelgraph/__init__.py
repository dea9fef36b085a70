"""modelgraph: model-based automation of software described as a state graph.

Transitions carry the edge contract an automation engine drives: guards
decide whether an edge applies to the current state, actions execute it,
and the target state type is loaded lazily by name. Contexts bridge named
external objects (browsers, devices) into automation carriers.
"""

from .base_exceptions import ModelGraphException
from .context import Context, ContextTable, HasContexts
from .model import LoadState, TargetTypeResolver, Transition, define_transition
from .model_exceptions import (
    AlreadyLoadedError,
    ContextError,
    InvalidContextError,
    MissingBlockError,
    ModelDefinitionError,
    TypeAlreadyRegisteredError,
    TypeMismatchError,
    TypeNotRegisteredError,
    UnresolvedTypeError,
)
from .registry import (
    TypeRegistry,
    get_default_registry,
    lookup_type_by_name,
    register_type,
    state_type,
)

__version__ = "0.1.0"

__all__ = [
    # Transitions
    "Transition",
    "define_transition",
    "TargetTypeResolver",
    "LoadState",
    # Contexts
    "Context",
    "ContextTable",
    "HasContexts",
    # Type registry
    "TypeRegistry",
    "get_default_registry",
    "lookup_type_by_name",
    "register_type",
    "state_type",
    # Exceptions
    "ModelGraphException",
    "ModelDefinitionError",
    "MissingBlockError",
    "AlreadyLoadedError",
    "UnresolvedTypeError",
    "TypeNotRegisteredError",
    "TypeAlreadyRegisteredError",
    "ContextError",
    "InvalidContextError",
    "TypeMismatchError",
]
