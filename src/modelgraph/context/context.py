"""Contexts - named external objects bridged into a carrier.

A Context is just an object with an idiomatic name: a browser handle, a
device handle, an API client. Registering contexts on a carrier (an
automation or session object) stores them in the carrier's context table
and exposes each object as an attribute named after the context, so the
carrier's methods can write ``self.browser`` instead of looking it up.
The carrier does not own the bound objects' lifecycle.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from ..logging import get_model_logger
from ..model_exceptions import InvalidContextError, TypeMismatchError

_MISSING = object()


@dataclass(frozen=True)
class Context:
    """An immutable name/object pair.

    The pair itself cannot be changed, but the bound object may still be
    mutated by whoever holds it.
    """

    name: str
    bound_object: Any

    def __post_init__(self) -> None:
        if self.name is None or self.name == "":
            raise ValueError("Context name must not be empty")


class ContextTable:
    """Context table held by a carrier.

    Maps context names to bound objects and mirrors each entry as an
    attribute on the carrier. Registration merges: new names are added and
    existing names are overwritten, both in the table and on the carrier.
    """

    def __init__(self, carrier: object) -> None:
        """Initialize an empty table.

        Args:
            carrier: Object that receives an attribute per registered context
        """
        self._carrier = carrier
        self._objects: dict[str, Any] = {}

    @property
    def contexts(self) -> Mapping[str, Any]:
        """Read-only view of name to bound object."""
        return MappingProxyType(self._objects)

    def register(self, contexts: Mapping[str, Context]) -> None:
        """Merge contexts into the table and onto the carrier.

        The whole mapping is validated before anything is merged, so a
        rejected call leaves the carrier unchanged.

        Args:
            contexts: Mapping of context name to Context

        Raises:
            TypeMismatchError: If ``contexts`` is not a mapping
            InvalidContextError: If a value is not a Context, its name does
                not match its key, or it cannot be exposed as an attribute
        """
        if not isinstance(contexts, Mapping):
            raise TypeMismatchError("a mapping of name to Context", contexts)

        for key, ctx in contexts.items():
            self._validate(key, ctx)

        self._expose(contexts.values())
        for ctx in contexts.values():
            self._objects[ctx.name] = ctx.bound_object

        get_model_logger().log_context_registered(
            type(self._carrier).__name__, [ctx.name for ctx in contexts.values()]
        )

    def lookup(self, name: str) -> Any:
        """Return the object bound to ``name``, or None if unregistered."""
        return self._objects.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._objects

    def __len__(self) -> int:
        return len(self._objects)

    def _expose(self, contexts: Iterable[Context]) -> None:
        # Attributes are set before the table changes; a carrier that refuses
        # one gets every attribute of this call restored.
        previous: list[tuple[str, Any]] = []
        try:
            for ctx in contexts:
                previous.append((ctx.name, getattr(self._carrier, ctx.name, _MISSING)))
                setattr(self._carrier, ctx.name, ctx.bound_object)
        except AttributeError as e:
            failed_name = previous[-1][0]
            for name, value in reversed(previous[:-1]):
                if value is _MISSING:
                    delattr(self._carrier, name)
                else:
                    setattr(self._carrier, name, value)
            raise InvalidContextError(
                failed_name, f"carrier does not accept the attribute ({e})"
            ) from e

    def _validate(self, key: Any, ctx: Any) -> None:
        if not isinstance(ctx, Context):
            raise InvalidContextError(key, f"expected Context, got {type(ctx).__name__}")
        if key != ctx.name:
            raise InvalidContextError(key, f"key does not match context name '{ctx.name}'")
        if not isinstance(ctx.name, str) or not ctx.name.isidentifier():
            raise InvalidContextError(ctx.name, "name is not a valid attribute name")
        if ctx.name not in self._objects and hasattr(type(self._carrier), ctx.name):
            raise InvalidContextError(ctx.name, "name would shadow a carrier attribute")


class HasContexts:
    """Capability for carriers that hold contexts.

    Subclasses get a ContextTable bound to themselves; no ``__init__``
    cooperation is required.

    Example:
        class BrowserAutomation(HasContexts):
            def open_home(self):
                self.browser.get("https://example.com")

        automation = BrowserAutomation()
        automation.register_contexts({"browser": Context("browser", driver)})
    """

    _context_table: ContextTable | None = None

    @property
    def context_table(self) -> ContextTable:
        if self._context_table is None:
            self._context_table = ContextTable(self)
        return self._context_table

    @property
    def contexts(self) -> Mapping[str, Any]:
        return self.context_table.contexts

    def register_contexts(self, contexts: Mapping[str, Context]) -> None:
        """Merge contexts into this carrier. See ContextTable.register."""
        self.context_table.register(contexts)

    def context(self, name: str) -> Any:
        """Return the object bound to ``name``, or None if unregistered."""
        return self.context_table.lookup(name)
