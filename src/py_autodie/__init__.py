"""Error-checked operating-system primitives, loaded on first use.

Each operation performs exactly one system call and raises a structured
``OperationError`` when it fails::

    from py_autodie import autodie

    fd = autodie.open("/tmp/x", os.O_WRONLY | os.O_CREAT, 0o644)
    autodie.close(fd)

    if not autodie.unlink_if_exists("/tmp/x"):
        ...  # it was already gone

Operations are resolved lazily; ``preload`` (or the
``PY_AUTODIE_PRELOAD`` environment variable) resolves them up front.
"""

from typing import Any

from py_autodie.config import Settings
from py_autodie.dispatcher import Dispatcher
from py_autodie.errors import (
    EEXIST,
    EINTR,
    ENOENT,
    AlreadyExistsError,
    BadDescriptorError,
    ConnectionRefusedFailure,
    DirectoryNotEmptyError,
    InterruptedCallError,
    IsDirectoryError,
    NotConnectedError,
    NotDirectoryError,
    NotFoundError,
    OperationError,
    PermissionDeniedError,
    RegistrationError,
    ResolutionError,
    make_error,
)
from py_autodie.logging import LogEntry, Logger, LogLevel
from py_autodie.operation import Operation, Outcome, operation
from py_autodie.registry import Registry
from py_autodie.trace import Tracer

autodie = Dispatcher.from_settings(Settings.from_environ())


def preload(*names: str) -> None:
    """Resolve *names* on the process-wide dispatcher."""
    autodie.preload(*names)


def call(name: str, *args: Any, **kwargs: Any) -> Any:
    """Invoke *name* on the process-wide dispatcher."""
    return autodie.call(name, *args, **kwargs)


__all__ = [
    "EEXIST",
    "EINTR",
    "ENOENT",
    "AlreadyExistsError",
    "BadDescriptorError",
    "ConnectionRefusedFailure",
    "Dispatcher",
    "DirectoryNotEmptyError",
    "InterruptedCallError",
    "IsDirectoryError",
    "LogEntry",
    "LogLevel",
    "Logger",
    "NotConnectedError",
    "NotDirectoryError",
    "NotFoundError",
    "Operation",
    "OperationError",
    "Outcome",
    "PermissionDeniedError",
    "Registry",
    "RegistrationError",
    "ResolutionError",
    "Settings",
    "Tracer",
    "autodie",
    "call",
    "make_error",
    "operation",
    "preload",
]
