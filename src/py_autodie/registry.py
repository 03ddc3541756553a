"""Registry — the process-wide map from identifier to implementation.

Lifecycle: it starts empty, each identifier is bound exactly once, and
nothing is ever removed.  After the first few calls it is read-mostly.

Reads are lock-free (a single dict lookup); writes take a lock so that
two threads can never interleave a check-then-set.  Re-registering the
*same* implementation is a no-op, which keeps repeated loads
idempotent.  Binding a *different* implementation to a taken name is a
programming error.
"""

from __future__ import annotations

import threading

from py_autodie.errors import RegistrationError
from py_autodie.operation import Operation


class Registry:
    """Append-only mapping of operation identifiers to operations."""

    def __init__(self) -> None:
        """Create an empty registry."""
        self._operations: dict[str, Operation] = {}
        self._lock = threading.Lock()

    def get(self, name: str) -> Operation | None:
        """Return the operation bound to *name*, or None if unresolved."""
        return self._operations.get(name)

    def register(self, name: str, implementation: Operation) -> bool:
        """Bind *implementation* to *name*.

        Args:
            name: The operation identifier.
            implementation: The operation to bind.

        Returns:
            True if the binding is new, False if it was already present.

        Raises:
            RegistrationError: If *name* is bound to something else, or
                the implementation carries a different identifier.

        """
        if implementation.name != name:
            msg = f"Cannot register {implementation.name!r} as {name!r}"
            raise RegistrationError(msg)
        with self._lock:
            existing = self._operations.get(name)
            if existing is implementation:
                return False
            if existing is not None:
                msg = f"Operation {name!r} is already registered"
                raise RegistrationError(msg)
            self._operations[name] = implementation
            return True

    def names(self) -> list[str]:
        """Return registered identifiers in registration order."""
        return list(self._operations)

    def __contains__(self, name: object) -> bool:
        """Return True if *name* is resolved."""
        return name in self._operations

    def __len__(self) -> int:
        """Return the number of registered operations."""
        return len(self._operations)
