"""Transition - an edge between two states of modeled software.

A Transition decides whether it currently applies (guards), executes the
change of state (actions), and lazily resolves the type of the state it
leads to.

Example:
    def configure(t: Transition) -> None:
        t.set_target_name("Dashboard", module="myapp.states.dashboard")
        t.add_guard(lambda page: page.is_logged_out())
        t.add_action(lambda page, user: page.log_in(user))

    to_dashboard = define_transition(configure)

    if to_dashboard.is_valid_for(login_page, user=alice):
        to_dashboard.run(login_page, user=alice)
        next_type = to_dashboard.resolve_target_type()
"""

import importlib
from collections.abc import Callable, Hashable
from typing import Any

from ...logging import get_model_logger
from ...model_exceptions import MissingBlockError
from ...registry import TypeRegistry, get_default_registry
from .target_type import Identifier, Loader, TargetTypeResolver

Guard = Callable[..., Any]
Action = Callable[..., Any]


class Transition:
    """Models when and how modeled software can change state.

    Guards are predicates over the current state object; the transition is
    valid when it has no guards or when any guard returns exactly ``True``.
    Actions are effects run in registration order against the current
    state object.

    Every action receives the *same* current state object. Multiple actions
    are a convenience: only the last one should actually cause the state
    change, otherwise later actions observe a state that is no longer
    current. This is not checked.

    The target type is resolved through a TargetTypeResolver, so the code
    defining the target state is only loaded when the transition is run or
    its target type is requested.
    """

    # Metadata key reserved for the target state's name
    TARGET_NAME_KEY = "target_name"

    def __init__(
        self,
        configure: Callable[["Transition"], Any] | None = None,
        *,
        registry: TypeRegistry | None = None,
    ) -> None:
        """Create a transition, optionally customizing it.

        Args:
            configure: Called with the new instance to register guards,
                actions and target information
            registry: Registry backing ``set_target_name`` lookups, defaults
                to the process-wide registry
        """
        self._metadata: dict[Hashable, Any] = {}
        self._guards: list[Guard] = []
        self._actions: list[Action] = []
        self._registry = registry
        self._resolver = TargetTypeResolver(describe=self.__repr__)

        if configure is not None:
            configure(self)

    # Metadata

    @property
    def metadata(self) -> dict[Hashable, Any]:
        return self._metadata

    def annotate(self, key: Hashable, value: Any) -> Any:
        """Associate metadata with this transition, overwriting ``key``.

        Returns:
            The value written
        """
        self._metadata[key] = value
        return value

    def metadata_at(self, key: Hashable, default: Any = None) -> Any:
        return self._metadata.get(key, default)

    # Guards and actions

    @property
    def guards(self) -> tuple[Guard, ...]:
        return tuple(self._guards)

    @property
    def actions(self) -> tuple[Action, ...]:
        return tuple(self._actions)

    def add_guard(self, predicate: Guard | None) -> Guard:
        """Add a predicate deciding whether this transition is valid.

        If *any* guard returns True the transition is valid. Returns the
        predicate, so this works as a decorator.

        Raises:
            MissingBlockError: If ``predicate`` is not callable
        """
        if predicate is None or not callable(predicate):
            raise MissingBlockError("add_guard", predicate, transition=repr(self))
        self._guards.append(predicate)
        return predicate

    def add_action(self, effect: Action | None) -> Action:
        """Add an effect executed when this transition is run.

        Effects run in the order they were added. Returns the effect, so
        this works as a decorator.

        Raises:
            MissingBlockError: If ``effect`` is not callable
        """
        if effect is None or not callable(effect):
            raise MissingBlockError("add_action", effect, transition=repr(self))
        self._actions.append(effect)
        return effect

    def is_valid_for(self, current_state: Any, **named_args: Any) -> bool:
        """Determine whether this transition is valid for ``current_state``.

        Only a guard returning exactly ``True`` counts; other truthy values
        do not. Evaluation stops at the first guard that passes.

        Args:
            current_state: Instance of the current state
            **named_args: Passed to every guard when given

        Returns:
            True if there are no guards or any guard returned True
        """
        valid = not self._guards or any(
            _call(guard, current_state, named_args) is True for guard in self._guards
        )
        get_model_logger().log_evaluation(repr(self), valid, len(self._guards))
        return valid

    def run(self, current_state: Any, **named_args: Any) -> list[Any]:
        """Execute this transition, loading the target type first if needed.

        Args:
            current_state: Instance of the current state
            **named_args: Passed to every action when given

        Returns:
            The return value of each action, in registration order
        """
        self.ensure_loaded()
        results = [_call(action, current_state, named_args) for action in self._actions]
        get_model_logger().log_run(repr(self), len(results))
        return results

    # Target type

    @property
    def loaded(self) -> bool:
        return self._resolver.loaded

    def is_loaded(self) -> bool:
        return self._resolver.loaded

    def set_type_loader(self, loader: Loader | None) -> Loader:
        """Set the routine that loads the target type's code.

        Running the loader must make the identifier's result resolvable.

        Raises:
            MissingBlockError: If ``loader`` is not callable
            AlreadyLoadedError: If the target type is already loaded
        """
        return self._resolver.set_loader(loader)

    def set_type_identifier(self, identifier: Identifier | None) -> Identifier:
        """Set the routine returning a reference to the target type.

        Raises:
            MissingBlockError: If ``identifier`` is not callable
            AlreadyLoadedError: If the target type is already loaded
        """
        return self._resolver.set_identifier(identifier)

    def ensure_loaded(self) -> bool:
        """Run the loader unless it has already run.

        Raises:
            UnresolvedTypeError: If no loader is registered
        """
        return self._resolver.ensure_loaded()

    def set_target_name(self, name: str, module: str | None = None) -> None:
        """Record the target state's name and resolve the target by it.

        If no identifier is set, one is installed that looks the name up in
        the type registry. If no loader is set, one is installed that
        imports ``module``, or does nothing when no module is given.

        Args:
            name: Registry name of the target type
            module: Module whose import registers the target type
        """
        self.annotate(self.TARGET_NAME_KEY, name)

        if not self._resolver.has_identifier:
            registry = self._registry

            def lookup_target() -> type:
                target_registry = registry if registry is not None else get_default_registry()
                return target_registry.lookup_type_by_name(name)

            self.set_type_identifier(lookup_target)

        if not self._resolver.has_loader:

            def load_target() -> None:
                if module is not None:
                    importlib.import_module(module)

            self.set_type_loader(load_target)

    def target_name(self) -> Any:
        return self.metadata_at(self.TARGET_NAME_KEY)

    def resolve_target_type(self) -> type:
        """Return the target state type, loading it first if needed.

        Raises:
            UnresolvedTypeError: If no loader or identifier is registered
            TypeNotRegisteredError: If a by-name target is not registered
        """
        return self._resolver.resolve()

    def __repr__(self) -> str:
        target = self.target_name()
        target_part = f"target={target!r}, " if target is not None else ""
        return (
            f"Transition({target_part}guards={len(self._guards)}, "
            f"actions={len(self._actions)}, loaded={self._resolver.loaded})"
        )


def define_transition(
    configure: Callable[[Transition], Any], *, registry: TypeRegistry | None = None
) -> Transition:
    """Build a transition with a configuration callback.

    Args:
        configure: Receives the new transition and wires it up
        registry: Registry backing ``set_target_name`` lookups

    Returns:
        The configured transition
    """
    return Transition(configure, registry=registry)


def _call(block: Callable[..., Any], current_state: Any, named_args: dict[str, Any]) -> Any:
    if named_args:
        return block(current_state, **named_args)
    return block(current_state)
