"""Tests for TargetTypeResolver's UNLOADED -> LOADED transition."""

import sys
import textwrap
import threading
import time
from unittest.mock import Mock

import pytest

from modelgraph import (
    AlreadyLoadedError,
    LoadState,
    TargetTypeResolver,
    Transition,
    UnresolvedTypeError,
)


class TestLoadState:
    def test_starts_unloaded(self):
        resolver = TargetTypeResolver()
        assert resolver.state is LoadState.UNLOADED
        assert resolver.loaded is False
        assert resolver.has_loader is False
        assert resolver.has_identifier is False

    def test_loaded_is_terminal(self):
        resolver = TargetTypeResolver()
        resolver.set_loader(lambda: None)
        resolver.ensure_loaded()

        assert resolver.state is LoadState.LOADED
        with pytest.raises(AlreadyLoadedError):
            resolver.set_loader(lambda: None)
        assert resolver.state is LoadState.LOADED

    def test_errors_carry_description(self):
        resolver = TargetTypeResolver(describe=lambda: "login -> dashboard")
        resolver.set_loader(lambda: None)
        resolver.ensure_loaded()

        with pytest.raises(AlreadyLoadedError) as exc_info:
            resolver.set_identifier(lambda: object)
        assert exc_info.value.context["transition"] == "login -> dashboard"


class TestConcurrentLoading:
    """Test that a shared resolver runs its loader once across threads."""

    def test_concurrent_ensure_loaded_runs_loader_once(self):
        calls = []
        lock = threading.Lock()

        def slow_loader():
            time.sleep(0.01)
            with lock:
                calls.append(threading.get_ident())

        resolver = TargetTypeResolver()
        resolver.set_loader(slow_loader)
        results: list[bool] = []
        barrier = threading.Barrier(8)

        def worker():
            barrier.wait()
            result = resolver.ensure_loaded()
            with lock:
                results.append(result)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(calls) == 1
        assert results == [True] * 8

    def test_concurrent_resolve_identifies_once(self):
        identifier = Mock(return_value=int)
        resolver = TargetTypeResolver()
        resolver.set_loader(lambda: None)
        resolver.set_identifier(identifier)

        threads = [threading.Thread(target=resolver.resolve) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        identifier.assert_called_once_with()
        assert resolver.resolve() is int

    def test_failed_load_is_retried_by_waiting_thread(self):
        started = threading.Event()
        release = threading.Event()
        calls = []

        def flaky_loader():
            calls.append(threading.get_ident())
            if len(calls) == 1:
                started.set()
                release.wait(timeout=5)
                raise RuntimeError("first load fails")

        resolver = TargetTypeResolver()
        resolver.set_loader(flaky_loader)
        errors: list[BaseException] = []

        def first():
            try:
                resolver.ensure_loaded()
            except RuntimeError as e:
                errors.append(e)

        first_thread = threading.Thread(target=first)
        first_thread.start()
        started.wait(timeout=5)
        second_thread = threading.Thread(target=resolver.ensure_loaded)
        second_thread.start()
        time.sleep(0.01)
        release.set()
        first_thread.join(timeout=5)
        second_thread.join(timeout=5)

        assert len(errors) == 1
        assert len(calls) == 2
        assert resolver.loaded is True

    def test_loaders_resolving_each_other_across_threads_fail_instead_of_hanging(self):
        barrier = threading.Barrier(2, timeout=5)
        login = Transition()
        dashboard = Transition()

        def load_via(other):
            first_call = [True]

            def loader():
                if first_call[0]:
                    first_call[0] = False
                    barrier.wait()
                other.resolve_target_type()

            return loader

        login.set_type_loader(load_via(dashboard))
        login.set_type_identifier(lambda: int)
        dashboard.set_type_loader(load_via(login))
        dashboard.set_type_identifier(lambda: str)
        errors: list[BaseException] = []
        lock = threading.Lock()

        def worker(transition):
            try:
                transition.ensure_loaded()
            except UnresolvedTypeError as e:
                with lock:
                    errors.append(e)

        threads = [
            threading.Thread(target=worker, args=(t,), daemon=True) for t in (login, dashboard)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert not any(t.is_alive() for t in threads)
        assert errors
        assert all(e.error_code == "UNRESOLVED_TYPE" for e in errors)
        assert login.loaded is False
        assert dashboard.loaded is False


class TestLazyModuleLoading:
    """Test loading a target state module only when it is needed."""

    def test_module_imported_on_first_run(self, tmp_path, monkeypatch):
        module_name = "lazy_target_states"
        (tmp_path / f"{module_name}.py").write_text(
            textwrap.dedent(
                """
                from modelgraph import state_type


                @state_type(name="Dashboard")
                class DashboardState:
                    pass
                """
            )
        )
        monkeypatch.syspath_prepend(str(tmp_path))
        monkeypatch.delitem(sys.modules, module_name, raising=False)

        transition = Transition()
        transition.set_target_name("Dashboard", module=module_name)
        transition.add_action(lambda page: "clicked")

        assert module_name not in sys.modules

        assert transition.run(object()) == ["clicked"]
        assert module_name in sys.modules

        target = transition.resolve_target_type()
        assert target.__name__ == "DashboardState"
        assert target is sys.modules[module_name].DashboardState

        monkeypatch.delitem(sys.modules, module_name, raising=False)
