"""Dispatcher — resolve an operation name, loading it on first use.

The catalog of operations is large and most programs use a handful, so
nothing is loaded up front.  Each identifier lives in its own unit,
``<package>.<identifier>``, and is in one of two states:

- **unresolved** — not yet in the registry.
- **resolved** — loaded and registered.  This is terminal.

Two paths move an identifier from unresolved to resolved:

1. ``preload(*names)`` — resolve immediately, in order (the equivalent
   of declaring "I will use these").
2. ``call(name, ...)`` — on a miss, load, re-resolve, then forward the
   call.  The caller cannot tell the difference from a preload.

An identifier that cannot be loaded raises ``ResolutionError``.  That is
a programming mistake, never an OS failure, and it is never retried.

Concurrency: a per-identifier lock guards each load, with a
double-checked lookup, so concurrent first calls perform one load and
all get the registered implementation.
"""

from __future__ import annotations

import importlib
import keyword
import pkgutil
import threading
from collections.abc import Callable, Mapping
from functools import partial
from typing import Any

from py_autodie.config import Settings
from py_autodie.core import EXCLUDED
from py_autodie.errors import OperationError, ResolutionError
from py_autodie.logging import Logger, LogLevel
from py_autodie.operation import Operation, Outcome
from py_autodie.registry import Registry
from py_autodie.trace import Tracer

DEFAULT_PACKAGE = "py_autodie.core"


def _check_identifier(name: str) -> None:
    """Reject names that cannot map onto a unit module."""
    if (
        not isinstance(name, str)  # pyright: ignore[reportUnnecessaryIsInstance]
        or not name.isidentifier()
        or not name.islower()
        or name.startswith("_")
        or keyword.iskeyword(name)
    ):
        msg = f"Invalid operation identifier: {name!r}"
        raise ResolutionError(msg)


class Dispatcher:
    """Lazy-loading registry of single-syscall operations.

    Attribute access forwards to ``call``, so ``d.unlink(path)`` is the
    same as ``d.call("unlink", path)``.
    """

    def __init__(
        self,
        package: str = DEFAULT_PACKAGE,
        *,
        loader: Callable[[str], Any] = importlib.import_module,
        excluded: Mapping[str, str] | None = None,
        registry: Registry | None = None,
        logger: Logger | None = None,
    ) -> None:
        """Create a dispatcher over the units of *package*.

        Args:
            package: Dotted name of the package holding the units.
            loader: Materializes a unit given its dotted module name.
            excluded: Identifiers refused outright, mapped to the reason.
            registry: Registry to populate (a fresh one by default).
            logger: Audit log (a fresh one by default).

        """
        self._package = package
        self._loader = loader
        self._excluded = dict(EXCLUDED if excluded is None else excluded)
        self._registry = registry if registry is not None else Registry()
        self._logger = logger if logger is not None else Logger()
        self._tracer = Tracer()
        self._guards: dict[str, threading.Lock] = {}
        self._guards_lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> Dispatcher:
        """Build a dispatcher, apply *settings*, and preload.

        Raises:
            ResolutionError: If a preload identifier cannot be resolved.

        """
        dispatcher = cls(**kwargs)
        if settings.trace:
            dispatcher.tracer.enable()
        dispatcher.preload(*settings.preload)
        return dispatcher

    @property
    def registry(self) -> Registry:
        """Return the registry this dispatcher populates."""
        return self._registry

    @property
    def logger(self) -> Logger:
        """Return the audit log."""
        return self._logger

    @property
    def tracer(self) -> Tracer:
        """Return the call tracer."""
        return self._tracer

    # -- Resolution -----------------------------------------------------------

    def preload(self, *names: str) -> None:
        """Resolve each of *names* now, in the order given.

        Already-resolved names are skipped.

        Raises:
            ResolutionError: At the first name that cannot be resolved.

        """
        for name in names:
            self._logger.log(LogLevel.DEBUG, f"preload {name}", source="dispatcher", operation=name)
            self.resolve(name)

    def resolve(self, name: str) -> Operation:
        """Return the implementation of *name*, loading it if necessary.

        Raises:
            ResolutionError: If *name* is invalid, excluded, or unloadable.

        """
        self._check_allowed(name)
        implementation = self._registry.get(name)
        if implementation is not None:
            return implementation
        guard = self._guard(name)
        try:
            with guard:
                implementation = self._registry.get(name)
                if implementation is None:
                    implementation = self._load(name)
                    self._registry.register(name, implementation)
                    self._logger.log(
                        LogLevel.INFO, f"resolved {name}", source="dispatcher", operation=name
                    )
        finally:
            self._release_guard(name, guard)
        return implementation

    def is_resolved(self, name: str) -> bool:
        """Return True if *name* has been loaded."""
        return name in self._registry

    def resolved(self) -> list[str]:
        """Return resolved identifiers in resolution order."""
        return self._registry.names()

    def available(self) -> list[str]:
        """Return every identifier the unit package provides, sorted."""
        package = self._loader(self._package)
        return sorted(
            info.name
            for info in pkgutil.iter_modules(package.__path__)
            if not info.name.startswith("_") and info.name not in self._excluded
        )

    def _guard(self, name: str) -> threading.Lock:
        """Return the lock serializing loads of *name*."""
        with self._guards_lock:
            guard = self._guards.get(name)
            if guard is None:
                guard = self._guards[name] = threading.Lock()
            return guard

    def _release_guard(self, name: str, guard: threading.Lock) -> None:
        """Forget the guard for *name* once a load attempt is over."""
        with self._guards_lock:
            if self._guards.get(name) is guard:
                del self._guards[name]

    def _check_allowed(self, name: str) -> None:
        """Reject malformed and excluded identifiers before any lookup."""
        try:
            _check_identifier(name)
            if name in self._excluded:
                msg = f"Operation {name!r} is not supported: {self._excluded[name]}"
                raise ResolutionError(msg)
        except ResolutionError as exc:
            self._logger.log(LogLevel.ERROR, str(exc), source="dispatcher", operation=None)
            raise

    def _load(self, name: str) -> Operation:
        """Load the unit for *name* and return its operation."""
        try:
            implementation = self._load_unit(name)
        except ResolutionError as exc:
            self._logger.log(LogLevel.ERROR, str(exc), source="dispatcher", operation=name)
            raise
        return implementation

    def _load_unit(self, name: str) -> Operation:
        """Import ``<package>.<name>`` and fetch the operation it defines."""
        module_name = f"{self._package}.{name}"
        missing = False
        try:
            unit = self._loader(module_name)
        except ModuleNotFoundError as exc:
            if exc.name != module_name:
                msg = f"Failed to load operation {name!r}: {exc}"
                raise ResolutionError(msg) from exc
            missing = True
        except ImportError as exc:
            msg = f"Failed to load operation {name!r}: {exc}"
            raise ResolutionError(msg) from exc
        if missing:
            msg = f"Unknown operation: {name!r}"
            raise ResolutionError(msg)
        implementation = getattr(unit, name, None)
        if not isinstance(implementation, Operation) or implementation.name != name:
            msg = f"Unit {module_name} does not define operation {name!r}"
            raise ResolutionError(msg)
        return implementation

    # -- Invocation -----------------------------------------------------------

    def call(self, name: str, *args: Any, **kwargs: Any) -> Any:
        """Invoke operation *name*, resolving it first if needed.

        Returns:
            Exactly what the operation returns.

        Raises:
            ResolutionError: If *name* cannot be resolved.
            OperationError: If the operation's system call fails.

        """
        implementation = self.resolve(name)
        try:
            result = implementation(*args, **kwargs)
        except OperationError as exc:
            self._logger.log(LogLevel.WARNING, str(exc), source="operation", operation=name)
            if self._tracer.enabled:
                self._tracer.record(name, args, kwargs, error=exc)
            raise
        if isinstance(result, Outcome) and result.tolerated:
            self._logger.log(
                LogLevel.INFO,
                f"{name} tolerated {result.reason}",
                source="operation",
                operation=name,
            )
        if self._tracer.enabled:
            self._tracer.record(name, args, kwargs, result)
        return result

    def __getattr__(self, name: str) -> Callable[..., Any]:
        """Return a forwarder so ``d.name(...)`` means ``d.call("name", ...)``."""
        if name.startswith("_"):
            raise AttributeError(name)
        return partial(self.call, name)
