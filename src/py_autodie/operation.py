"""Operations — single system calls with a uniform error policy.

An ``Operation`` wraps exactly one underlying OS call.  Calling it
forwards the arguments unchanged, so the signature is the signature of
the analogous ``os`` / ``socket`` primitive.  What the wrapper adds is
the **error policy**:

- **Default** — any OS error becomes a Failure Record
  (``OperationError``) and is raised.
- **Tolerant** — a variant such as ``unlink_if_exists`` names a fixed set
  of error codes to absorb.  It always returns an ``Outcome``: truthy
  when the call succeeded, falsy when one of the tolerated codes
  occurred.  Every other code still raises.
- **Interrupts** — an ``EINTR`` failure re-issues the same call when the
  operation allows restarting; otherwise it is classified like any other
  code.  EINTR can never be tolerated.

The errno is read only inside the ``except`` clause and the Failure
Record is raised after it, so the raw ``OSError`` never leaks into the
caller's exception context.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from typing import Any

from py_autodie.errors import EINTR, code_name, make_error


@dataclass(frozen=True)
class Outcome:
    """Result of a tolerant operation.

    Truthiness tells success from toleration; ``errno`` tells which
    tolerated code occurred.  A raised ``OperationError`` is the third,
    disjoint possibility.

    Attributes:
        operation: Identifier of the operation that produced this result.
        value: The system call's return value (``None`` when tolerated).
        errno: The tolerated error code, or ``None`` on success.

    """

    operation: str
    value: Any = None
    errno: int | None = None

    @property
    def succeeded(self) -> bool:
        """Return True if the system call itself succeeded."""
        return self.errno is None

    @property
    def tolerated(self) -> bool:
        """Return True if a tolerated error code was absorbed."""
        return self.errno is not None

    @property
    def reason(self) -> str | None:
        """Return the symbolic name of the tolerated code, if any."""
        return None if self.errno is None else code_name(self.errno)

    def __bool__(self) -> bool:
        """Return True only for a genuine success."""
        return self.errno is None


@dataclass(frozen=True)
class Operation:
    """One exposed primitive bound to exactly one system call.

    Attributes:
        name: The operation identifier.
        syscall: The callable performing the single OS call.
        tolerate: Error codes absorbed into a falsy ``Outcome``.
        restart: Re-issue the call when it fails with EINTR.

    """

    name: str
    syscall: Callable[..., Any] = field(repr=False)
    tolerate: frozenset[int] = frozenset()
    restart: bool = True

    def __post_init__(self) -> None:
        """Reject tolerated-code sets that would blur the error policy."""
        unknown = sorted(c for c in self.tolerate if code_name(c) == f"E{c}")
        if unknown:
            msg = f"{self.name}: unknown error codes {unknown}"
            raise ValueError(msg)
        if EINTR in self.tolerate:
            msg = f"{self.name}: EINTR cannot be tolerated"
            raise ValueError(msg)

    @property
    def is_tolerant(self) -> bool:
        """Return True if this operation absorbs any error codes."""
        return bool(self.tolerate)

    def tolerating(self, name: str, *codes: int) -> Operation:
        """Derive a tolerant variant of this operation.

        Args:
            name: Identifier of the variant (e.g. ``"unlink_if_exists"``).
            *codes: The error codes the variant absorbs.

        Returns:
            A new Operation sharing this operation's system call.

        Raises:
            ValueError: If no codes are given, or a code is unknown or EINTR.

        """
        if not codes:
            msg = f"{name}: a tolerant variant needs at least one error code"
            raise ValueError(msg)
        return replace(self, name=name, tolerate=self.tolerate | frozenset(codes))

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        """Perform the system call and apply the error policy.

        Returns:
            The system call's return value, or an ``Outcome`` for
            tolerant variants.

        Raises:
            OperationError: If the call fails with an untolerated code.

        """
        while True:
            code: int | None = None
            try:
                value = self.syscall(*args, **kwargs)
            except OSError as exc:
                if exc.errno is None:
                    raise
                code = exc.errno
            if code is None:
                return Outcome(self.name, value) if self.tolerate else value
            if code == EINTR and self.restart:
                continue
            if code in self.tolerate:
                return Outcome(self.name, errno=code)
            raise make_error(self.name, code, args, kwargs)


def operation(name: str, syscall: Callable[..., Any], *, restart: bool = True) -> Operation:
    """Wrap *syscall* as the default-policy operation *name*."""
    return Operation(name, syscall, restart=restart)
