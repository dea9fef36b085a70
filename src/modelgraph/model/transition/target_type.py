"""Lazy resolution of a transition's target state type.

State definitions commonly reference each other: a login page has a
transition to the dashboard and the dashboard has one back. Importing
every target eagerly would create import cycles, so a transition holds a
*loader* that brings its target's code into the interpreter and an
*identifier* that returns the target type once loaded. Both run on first
need, and the loader runs exactly once.
"""

import threading
from collections.abc import Callable
from enum import Enum
from typing import Any

from ...logging import get_model_logger
from ...model_exceptions import AlreadyLoadedError, MissingBlockError, UnresolvedTypeError

Loader = Callable[[], Any]
Identifier = Callable[[], type]

_UNRESOLVED = object()

# Guards load state of every resolver; never held while user code runs
_load_lock = threading.Lock()
# Thread id -> resolver whose load that thread is waiting for
_waiting_on: dict[int, "TargetTypeResolver"] = {}


class LoadState(Enum):
    """Load state of a target type.

    - UNLOADED: loader has not completed yet
    - LOADED: loader ran once; terminal
    """

    UNLOADED = "UNLOADED"
    LOADED = "LOADED"


class TargetTypeResolver:
    """Two-state holder for a target type's loader and identifier.

    UNLOADED -> LOADED happens on the first successful ``ensure_loaded``
    call and never reverts. While UNLOADED, the loader and identifier may be
    set and replaced freely; once LOADED, setting either raises
    AlreadyLoadedError.

    Concurrent callers run the loader once: the first caller runs it and
    the others wait for it to finish. No lock is held while the loader
    runs, so a loader may resolve other transitions. Loaders that resolve
    each other in a cycle fail with UnresolvedTypeError, on one thread or
    across threads, instead of recursing or deadlocking.
    """

    def __init__(self, describe: Callable[[], str] | None = None) -> None:
        """Initialize an unloaded resolver.

        Args:
            describe: Returns a description of the owning transition, used in
                errors and log events
        """
        self._describe = describe or (lambda: "<transition>")
        self._loader: Loader | None = None
        self._identifier: Identifier | None = None
        self._target_type: Any = _UNRESOLVED
        self._state = LoadState.UNLOADED
        self._loading_thread: int | None = None
        self._load_done = threading.Event()
        self._identify_lock = threading.RLock()

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def loaded(self) -> bool:
        return self._state is LoadState.LOADED

    @property
    def has_loader(self) -> bool:
        return self._loader is not None

    @property
    def has_identifier(self) -> bool:
        return self._identifier is not None

    def set_loader(self, loader: Loader | None) -> Loader:
        """Register the loader.

        Raises:
            MissingBlockError: If ``loader`` is not callable
            AlreadyLoadedError: If the target type is already loaded
        """
        self._check_settable("set_type_loader", loader)
        with _load_lock:
            if self.loaded:
                raise AlreadyLoadedError("set_type_loader", transition=self._describe())
            self._loader = loader
        return loader

    def set_identifier(self, identifier: Identifier | None) -> Identifier:
        """Register the identifier.

        Raises:
            MissingBlockError: If ``identifier`` is not callable
            AlreadyLoadedError: If the target type is already loaded
        """
        self._check_settable("set_type_identifier", identifier)
        with _load_lock:
            if self.loaded:
                raise AlreadyLoadedError("set_type_identifier", transition=self._describe())
            self._identifier = identifier
        return identifier

    def ensure_loaded(self) -> bool:
        """Run the loader if it has not run yet.

        Returns:
            True once the target type is loaded

        Raises:
            UnresolvedTypeError: If no loader is registered, if the loader
                calls back into this method, or if loaders wait on each
                other in a cycle
        """
        if self.loaded:
            return True

        current = threading.get_ident()
        while True:
            with _load_lock:
                if self.loaded:
                    return True
                owner = self._loading_thread
                if owner is None:
                    if self._loader is None:
                        raise UnresolvedTypeError(
                            "no loader registered", transition=self._describe()
                        )
                    loader = self._loader
                    self._loading_thread = current
                    self._load_done = threading.Event()
                    break
                if owner == current:
                    raise UnresolvedTypeError(
                        "loader re-entered ensure_loaded", transition=self._describe()
                    )
                if _waits_for(owner, current):
                    raise UnresolvedTypeError(
                        "circular target loading across threads", transition=self._describe()
                    )
                _waiting_on[current] = self
                done = self._load_done

            try:
                done.wait()
            finally:
                with _load_lock:
                    _waiting_on.pop(current, None)
            # A failed load leaves the resolver UNLOADED; the next pass retries it

        try:
            loader()
        except Exception as e:
            self._finish_loading(LoadState.UNLOADED)
            get_model_logger().log_load_failed(self._describe(), e)
            raise
        except BaseException:
            self._finish_loading(LoadState.UNLOADED)
            raise

        self._finish_loading(LoadState.LOADED)
        get_model_logger().log_loaded(self._describe())
        return True

    def resolve(self) -> type:
        """Load if needed, then return the memoized target type.

        The identifier runs under a per-resolver lock, so it should only
        look the type up and not resolve other transitions.

        Raises:
            UnresolvedTypeError: If no loader or identifier is registered
        """
        self.ensure_loaded()

        with self._identify_lock:
            if self._target_type is _UNRESOLVED:
                if self._identifier is None:
                    raise UnresolvedTypeError(
                        "no identifier registered", transition=self._describe()
                    )
                self._target_type = self._identifier()
            return self._target_type

    def _finish_loading(self, state: LoadState) -> None:
        with _load_lock:
            self._state = state
            self._loading_thread = None
            self._load_done.set()

    def _check_settable(self, operation: str, block: Any) -> None:
        if block is None or not callable(block):
            raise MissingBlockError(operation, block, transition=self._describe())


def _waits_for(thread: int, target: int) -> bool:
    """Whether ``thread`` is, transitively, waiting on a load run by ``target``.

    Must be called with ``_load_lock`` held.
    """
    seen: set[int] = set()
    while thread not in seen:
        if thread == target:
            return True
        seen.add(thread)
        resolver = _waiting_on.get(thread)
        if resolver is None or resolver._loading_thread is None:
            return False
        thread = resolver._loading_thread
    return False
