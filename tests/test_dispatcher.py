"""Tests for the lazy-loading dispatcher.

Operations live in one unit module each and are resolved on first use
or by an explicit preload.  Fake loaders let us count loads and
simulate missing or broken units; the real catalog is exercised too.
"""

import errno
import sys
import threading
import time
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from py_autodie.config import Settings
from py_autodie.dispatcher import Dispatcher
from py_autodie.errors import NotFoundError, OperationError, ResolutionError
from py_autodie.logging import LogLevel
from py_autodie.operation import Operation, Outcome, operation

_THREADS = 8
_MANY_NAMES = 50
_PONG = "pong"


def _pong(*_args: Any) -> str:
    """Stand-in system call that always succeeds."""
    return _PONG


PING = operation("ping", _pong)


class _FakeLoader:
    """Loader serving units from a dict and counting every load."""

    def __init__(self, units: dict[str, Any], *, delay: float = 0.0) -> None:
        """Serve *units*, keyed by dotted module name."""
        self.units = units
        self.delay = delay
        self.loads: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, module_name: str) -> Any:
        """Return the unit or raise like ``importlib.import_module``."""
        with self._lock:
            self.loads.append(module_name)
        time.sleep(self.delay)
        if module_name not in self.units:
            msg = f"No module named {module_name!r}"
            raise ModuleNotFoundError(msg, name=module_name)
        return self.units[module_name]


def _fake_dispatcher(**units: Any) -> tuple[Dispatcher, _FakeLoader]:
    """Build a dispatcher over package ``fake`` with the given units."""
    loader = _FakeLoader({f"fake.{name}": unit for name, unit in units.items()})
    return Dispatcher("fake", loader=loader, excluded={}), loader


class TestLazyPath:
    """Verify first-use resolution."""

    def test_call_resolves_on_first_use(self) -> None:
        """Calling an unresolved name loads it and forwards the call."""
        dispatcher, loader = _fake_dispatcher(ping=SimpleNamespace(ping=PING))
        assert not dispatcher.is_resolved("ping")
        assert dispatcher.call("ping", "host") == _PONG
        assert dispatcher.is_resolved("ping")
        assert loader.loads == ["fake.ping"]

    def test_second_call_does_not_reload(self) -> None:
        """Resolved is terminal: later calls skip the loader."""
        dispatcher, loader = _fake_dispatcher(ping=SimpleNamespace(ping=PING))
        dispatcher.call("ping")
        dispatcher.call("ping")
        assert loader.loads == ["fake.ping"]

    def test_attribute_access_forwards_to_call(self) -> None:
        """``d.ping(...)`` is the same as ``d.call("ping", ...)``."""
        dispatcher, _ = _fake_dispatcher(ping=SimpleNamespace(ping=PING))
        assert dispatcher.ping() == _PONG

    def test_private_attributes_are_not_operations(self) -> None:
        """Underscore names raise AttributeError, not a resolution."""
        dispatcher, loader = _fake_dispatcher()
        with pytest.raises(AttributeError):
            dispatcher._nothing  # noqa: B018
        assert loader.loads == []

    def test_load_keeps_callers_exception_state(self) -> None:
        """Loading inside an except block leaves the handled exception intact."""
        dispatcher, _ = _fake_dispatcher(ping=SimpleNamespace(ping=PING))
        try:
            msg = "outer"
            raise KeyError(msg)
        except KeyError:
            dispatcher.call("ping")
            with pytest.raises(ResolutionError):
                dispatcher.call("nope")
            assert sys.exc_info()[0] is KeyError

    def test_lazy_equals_preloaded(self) -> None:
        """Lazy and preloaded resolution give the same implementation."""
        lazy, _ = _fake_dispatcher(ping=SimpleNamespace(ping=PING))
        eager, _ = _fake_dispatcher(ping=SimpleNamespace(ping=PING))
        eager.preload("ping")
        assert lazy.resolve("ping") is eager.resolve("ping") is PING


class TestPreload:
    """Verify explicit preloading."""

    def test_preload_in_order(self) -> None:
        """Names are loaded immediately, in the order given."""
        pong = operation("pong", _pong)
        dispatcher, loader = _fake_dispatcher(
            ping=SimpleNamespace(ping=PING), pong=SimpleNamespace(pong=pong)
        )
        dispatcher.preload("pong", "ping")
        assert loader.loads == ["fake.pong", "fake.ping"]
        assert dispatcher.resolved() == ["pong", "ping"]

    def test_preload_is_idempotent(self) -> None:
        """Preloading twice, then calling, loads once."""
        dispatcher, loader = _fake_dispatcher(ping=SimpleNamespace(ping=PING))
        dispatcher.preload("ping")
        dispatcher.preload("ping", "ping")
        dispatcher.call("ping")
        assert loader.loads == ["fake.ping"]
        assert len(dispatcher.registry) == 1

    def test_preload_stops_at_unknown_name(self) -> None:
        """An unknown name fails the preload; earlier names stay resolved."""
        dispatcher, _ = _fake_dispatcher(ping=SimpleNamespace(ping=PING))
        with pytest.raises(ResolutionError):
            dispatcher.preload("ping", "nope", "ping")
        assert dispatcher.resolved() == ["ping"]


class TestResolutionFailures:
    """Verify the developer-error path."""

    def test_unknown_identifier(self) -> None:
        """A missing unit raises ResolutionError, not an OS failure."""
        dispatcher, _ = _fake_dispatcher()
        with pytest.raises(ResolutionError) as info:
            dispatcher.call("nope")
        assert not isinstance(info.value, OSError)
        assert not dispatcher.is_resolved("nope")

    def test_unknown_identifier_not_cached(self) -> None:
        """A failed resolution is retried only when the caller asks again."""
        dispatcher, loader = _fake_dispatcher()
        for _ in range(2):
            with pytest.raises(ResolutionError):
                dispatcher.resolve("nope")
        assert loader.loads == ["fake.nope", "fake.nope"]

    @pytest.mark.parametrize("name", ["os.path", "../etc", "_private", "Open", "class", ""])
    def test_malformed_identifier_never_loads(self, name: str) -> None:
        """Malformed names are rejected before the loader runs."""
        dispatcher, loader = _fake_dispatcher()
        with pytest.raises(ResolutionError):
            dispatcher.resolve(name)
        assert loader.loads == []

    def test_unhashable_identifier(self) -> None:
        """A non-string identifier is a resolution failure, not a TypeError."""
        dispatcher, loader = _fake_dispatcher()
        with pytest.raises(ResolutionError):
            dispatcher.resolve(["open"])  # pyright: ignore[reportArgumentType]
        assert loader.loads == []

    def test_excluded_identifier(self) -> None:
        """Deliberately unsupported primitives are refused."""
        dispatcher = Dispatcher()
        with pytest.raises(ResolutionError, match="not supported"):
            dispatcher.call("chdir", "/")

    def test_unit_without_operation(self) -> None:
        """A unit lacking the named Operation is a resolution failure."""
        dispatcher, _ = _fake_dispatcher(ping=SimpleNamespace(ping=_pong))
        with pytest.raises(ResolutionError):
            dispatcher.resolve("ping")

    def test_unit_with_mismatched_operation(self) -> None:
        """The unit's Operation must carry the requested identifier."""
        dispatcher, _ = _fake_dispatcher(pong=SimpleNamespace(pong=PING))
        with pytest.raises(ResolutionError):
            dispatcher.resolve("pong")

    def test_broken_unit_chains_import_error(self) -> None:
        """An import failure inside a unit is reported as failed to load."""

        def loader(module_name: str) -> Any:
            msg = "No module named 'missing_dependency'"
            raise ModuleNotFoundError(msg, name="missing_dependency")

        dispatcher = Dispatcher("fake", loader=loader, excluded={})
        with pytest.raises(ResolutionError) as info:
            dispatcher.resolve("ping")
        assert isinstance(info.value.__cause__, ModuleNotFoundError)

    def test_resolution_failure_is_logged(self) -> None:
        """Resolution failures are logged at ERROR before raising."""
        dispatcher, _ = _fake_dispatcher()
        with pytest.raises(ResolutionError):
            dispatcher.resolve("nope")
        errors = dispatcher.logger.filter(min_level=LogLevel.ERROR)
        assert [e.operation for e in errors] == ["nope"]


class TestGuards:
    """Verify per-identifier guards do not outlive a load attempt."""

    def test_failed_resolutions_leave_no_guards(self) -> None:
        """Unknown, malformed, and excluded names leave the guard map empty."""
        dispatcher = Dispatcher()
        for n in range(_MANY_NAMES):
            with pytest.raises(ResolutionError):
                dispatcher.resolve(f"nope{n}")
        for name in ("os.path", "Open", "chdir"):
            with pytest.raises(ResolutionError):
                dispatcher.resolve(name)
        assert dispatcher._guards == {}

    def test_successful_resolution_leaves_no_guard(self) -> None:
        """Once registered, the guard for a name is dropped."""
        dispatcher, _ = _fake_dispatcher(ping=SimpleNamespace(ping=PING))
        dispatcher.resolve("ping")
        assert dispatcher._guards == {}


class TestConcurrentResolution:
    """Verify concurrent first use of one identifier."""

    def test_single_load_for_concurrent_first_use(self) -> None:
        """Many threads resolving at once share one load."""
        loader = _FakeLoader({"fake.ping": SimpleNamespace(ping=PING)}, delay=0.01)
        dispatcher = Dispatcher("fake", loader=loader, excluded={})
        barrier = threading.Barrier(_THREADS)
        results: list[Operation] = []
        results_lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            op = dispatcher.resolve("ping")
            with results_lock:
                results.append(op)

        threads = [threading.Thread(target=worker) for _ in range(_THREADS)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert loader.loads == ["fake.ping"]
        assert len(results) == _THREADS
        assert all(op is PING for op in results)
        assert dispatcher.resolved() == ["ping"]


class TestCallObservability:
    """Verify logging and tracing of calls."""

    def test_failure_logged_and_propagated(self, tmp_path: Path) -> None:
        """An OS failure is logged at WARNING and re-raised unchanged."""
        dispatcher = Dispatcher()
        with pytest.raises(NotFoundError) as info:
            dispatcher.call("rmdir", tmp_path / "missing")
        assert info.value.operation == "rmdir"
        warnings = dispatcher.logger.filter(min_level=LogLevel.WARNING, operation="rmdir")
        assert len(warnings) == 1

    def test_tolerated_outcome_logged(self, tmp_path: Path) -> None:
        """A tolerated code is logged at INFO with its reason."""
        dispatcher = Dispatcher()
        result = dispatcher.call("unlink_if_exists", tmp_path / "missing")
        assert isinstance(result, Outcome)
        assert result.errno == errno.ENOENT
        entries = dispatcher.logger.filter(source="operation", min_level=LogLevel.INFO)
        assert any("ENOENT" in e.message for e in entries)

    def test_trace_records_calls(self, tmp_path: Path) -> None:
        """Enabled tracing records success, toleration, and failure."""
        dispatcher = Dispatcher()
        dispatcher.tracer.enable()
        dispatcher.call("mkdir", tmp_path / "d")
        dispatcher.call("mkdir_if_not_exists", tmp_path / "d")
        with pytest.raises(OperationError):
            dispatcher.call("mkdir", tmp_path / "d")
        log = dispatcher.tracer.log()
        expected_entries = 3
        assert len(log) == expected_entries
        assert log[0].startswith("#1 mkdir(")
        assert log[0].endswith("= None")
        assert log[1].endswith("= TOLERATED: EEXIST")
        assert "= ERROR: EEXIST" in log[2]

    def test_trace_disabled_by_default(self, tmp_path: Path) -> None:
        """Nothing is traced unless tracing is enabled."""
        dispatcher = Dispatcher()
        dispatcher.call("stat", tmp_path)
        assert dispatcher.tracer.log() == []


class TestCatalog:
    """Verify the real unit catalog."""

    def test_available_lists_units(self) -> None:
        """The catalog lists units and hides excluded names."""
        names = Dispatcher().available()
        assert "open" in names
        assert "unlink_if_exists" in names
        assert "shutdown_if_connected" in names
        assert "chdir" not in names

    def test_every_unit_resolves_lazily(self) -> None:
        """Every catalog unit resolves to an Operation of the same name."""
        dispatcher = Dispatcher()
        for name in dispatcher.available():
            op = dispatcher.resolve(name)
            assert isinstance(op, Operation)
            assert op.name == name

    def test_lazy_matches_preload_for_catalog(self) -> None:
        """Preloading and lazy resolution agree for every unit."""
        lazy = Dispatcher()
        eager = Dispatcher()
        names = eager.available()
        eager.preload(*names)
        for name in names:
            assert lazy.resolve(name) is eager.resolve(name)

    def test_tolerant_units_name_their_codes(self) -> None:
        """The ``_if_`` units tolerate exactly their documented code."""
        dispatcher = Dispatcher()
        expected = {
            "unlink_if_exists": {errno.ENOENT},
            "rmdir_if_exists": {errno.ENOENT},
            "open_if_exists": {errno.ENOENT},
            "chmod_if_exists": {errno.ENOENT},
            "mkdir_if_not_exists": {errno.EEXIST},
            "shutdown_if_connected": {errno.ENOTCONN},
        }
        for name, codes in expected.items():
            assert dispatcher.resolve(name).tolerate == codes


class TestFromSettings:
    """Verify building a dispatcher from settings."""

    def test_preload_and_trace(self) -> None:
        """Settings preload names and switch tracing on."""
        dispatcher = Dispatcher.from_settings(Settings(preload=("open", "close"), trace=True))
        assert dispatcher.resolved() == ["open", "close"]
        assert dispatcher.tracer.enabled

    def test_unknown_preload_fails_fast(self) -> None:
        """An unknown preload name raises at construction."""
        with pytest.raises(ResolutionError):
            Dispatcher.from_settings(Settings(preload=("no_such_call",)))
