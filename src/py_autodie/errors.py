"""Error taxonomy — how a failed system call is reported.

Every exposed operation performs exactly one system call, so exactly one
thing can go wrong per invocation.  That lets us describe each failure
precisely with a **Failure Record**: which operation failed, the raw OS
error code, and the arguments it was called with.

There are three disjoint kinds of error:

1. ``OperationError`` — an OS call failed.  Subclasses are chosen by the
   error code (``NotFoundError`` for ``ENOENT`` and so on), and each one
   also inherits the matching built-in ``OSError`` subclass so ordinary
   ``except FileNotFoundError`` code keeps working.
2. Tolerated failures — not exceptions at all; see
   ``py_autodie.operation.Outcome``.
3. ``ResolutionError`` — an operation name could not be resolved.  This
   is a programming mistake, so it is deliberately *not* an ``OSError``.

The numeric constants come straight from the host's ``errno`` module so
they always match the platform's convention.
"""

from __future__ import annotations

import errno as _errno
import os
from typing import Any

ENOENT = _errno.ENOENT
EEXIST = _errno.EEXIST
EINTR = _errno.EINTR
EACCES = _errno.EACCES
EPERM = _errno.EPERM
EBADF = _errno.EBADF
EISDIR = _errno.EISDIR
ENOTDIR = _errno.ENOTDIR
ENOTEMPTY = _errno.ENOTEMPTY
ENOTCONN = _errno.ENOTCONN
ECONNREFUSED = _errno.ECONNREFUSED


def code_name(code: int) -> str:
    """Return the symbolic name of an error code (``2`` -> ``"ENOENT"``)."""
    return _errno.errorcode.get(code, f"E{code}")


def _path_arg(args: tuple[Any, ...]) -> str | bytes | None:
    """Return the first path-like positional argument, if any."""
    for arg in args:
        if isinstance(arg, (str, bytes)):
            return arg
        if isinstance(arg, os.PathLike):
            return os.fspath(arg)  # pyright: ignore[reportUnknownArgumentType]
    return None


class OperationError(OSError):
    """Raised when an operation's single system call fails.

    Attributes:
        operation: Identifier of the operation that failed.
        errno: The raw OS error code.
        strerror: The OS description of the error code.
        call_args: Positional arguments the operation was called with.
        call_kwargs: Keyword arguments the operation was called with.
        filename: The first path-like argument, or ``None``.

    """

    def __init__(
        self,
        operation: str,
        code: int,
        call_args: tuple[Any, ...] = (),
        call_kwargs: dict[str, Any] | None = None,
    ) -> None:
        """Build the record from the failing call."""
        filename = _path_arg(call_args)
        if filename is None:
            super().__init__(code, os.strerror(code))
        else:
            super().__init__(code, os.strerror(code), filename)
        self.operation = operation
        self.call_args = call_args
        self.call_kwargs = dict(call_kwargs) if call_kwargs else {}

    def __reduce__(self) -> tuple[type[OperationError], tuple[Any, ...]]:
        """Rebuild from the call, not from ``OSError.args``, for pickle and copy."""
        return (type(self), (self.operation, self.errno, self.call_args, self.call_kwargs))

    @property
    def code_name(self) -> str:
        """Return the symbolic error code, e.g. ``"ENOENT"``."""
        return code_name(self.errno)

    def __str__(self) -> str:
        """Format as ``operation(args): [ENOENT] No such file or directory``."""
        shown = [repr(a) for a in self.call_args]
        shown += [f"{k}={v!r}" for k, v in self.call_kwargs.items()]
        return f"{self.operation}({', '.join(shown)}): [{self.code_name}] {self.strerror}"


class NotFoundError(OperationError, FileNotFoundError):
    """The target does not exist (ENOENT)."""


class AlreadyExistsError(OperationError, FileExistsError):
    """The target already exists (EEXIST)."""


class PermissionDeniedError(OperationError, PermissionError):
    """The caller lacks permission (EACCES, EPERM)."""


class NotDirectoryError(OperationError, NotADirectoryError):
    """A path component is not a directory (ENOTDIR)."""


class IsDirectoryError(OperationError, IsADirectoryError):
    """The target is a directory (EISDIR)."""


class DirectoryNotEmptyError(OperationError):
    """The directory still has entries (ENOTEMPTY)."""


class BadDescriptorError(OperationError):
    """The file descriptor is not open (EBADF)."""


class NotConnectedError(OperationError):
    """The socket is not connected (ENOTCONN)."""


class ConnectionRefusedFailure(OperationError, ConnectionRefusedError):
    """Nothing is listening at the remote address (ECONNREFUSED)."""


class InterruptedCallError(OperationError, InterruptedError):
    """The call was interrupted by a signal and not restarted (EINTR)."""


_ERRORS_BY_CODE: dict[int, type[OperationError]] = {
    ENOENT: NotFoundError,
    EEXIST: AlreadyExistsError,
    EACCES: PermissionDeniedError,
    EPERM: PermissionDeniedError,
    ENOTDIR: NotDirectoryError,
    EISDIR: IsDirectoryError,
    ENOTEMPTY: DirectoryNotEmptyError,
    EBADF: BadDescriptorError,
    ENOTCONN: NotConnectedError,
    ECONNREFUSED: ConnectionRefusedFailure,
    EINTR: InterruptedCallError,
}


def make_error(
    operation: str,
    code: int,
    call_args: tuple[Any, ...] = (),
    call_kwargs: dict[str, Any] | None = None,
) -> OperationError:
    """Build the Failure Record for a failed call.

    Args:
        operation: Identifier of the failing operation.
        code: The raw OS error code.
        call_args: Positional arguments of the call.
        call_kwargs: Keyword arguments of the call.

    Returns:
        An ``OperationError`` subclass instance chosen by *code*.

    """
    cls = _ERRORS_BY_CODE.get(code, OperationError)
    return cls(operation, code, call_args, call_kwargs)


class ResolutionError(Exception):
    """Raise when an operation identifier cannot be resolved."""


class RegistrationError(ResolutionError):
    """Raise when an identifier is bound to a second implementation."""
