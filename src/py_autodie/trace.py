"""Call tracing — strace for the operation layer.

When enabled, every call made through a dispatcher is recorded as one
line, numbered in order::

    #1 open("/tmp/x", 577, 420) = 3
    #2 unlink_if_exists("/tmp/y") = TOLERATED: ENOENT
    #3 rmdir("/tmp") = ERROR: ENOTEMPTY Directory not empty

Arguments are sanitized for display so a large buffer does not flood
the log, and the log is capped, evicting the oldest entries first.
"""

from __future__ import annotations

import threading
from typing import Any

from py_autodie.errors import OperationError
from py_autodie.operation import Outcome

MAX_TRACE_ENTRIES = 1000
_MAX_ARG_LEN = 50
_MAX_LIST_ITEMS = 5


class Tracer:
    """Numbered, bounded log of operation calls."""

    def __init__(self) -> None:
        """Create a disabled tracer with an empty log."""
        self._enabled = False
        self._log: list[str] = []
        self._sequence = 0
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        """Return whether tracing is currently enabled."""
        return self._enabled

    def enable(self) -> None:
        """Enable tracing, clearing the log and resetting the sequence."""
        with self._lock:
            self._enabled = True
            self._log.clear()
            self._sequence = 0

    def disable(self) -> None:
        """Disable tracing, keeping the log for post-hoc review."""
        self._enabled = False

    def log(self) -> list[str]:
        """Return a copy of the trace entries."""
        return list(self._log)

    def clear(self) -> None:
        """Clear the trace log and reset the sequence counter."""
        with self._lock:
            self._log.clear()
            self._sequence = 0

    def record(
        self,
        name: str,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        result: Any = None,
        *,
        error: OperationError | None = None,
    ) -> None:
        """Format and append one entry, FIFO-evicting if over the limit."""
        shown = [sanitize(a) for a in args]
        shown += [f"{k}={sanitize(v)}" for k, v in kwargs.items()]
        if error is not None:
            outcome = f"ERROR: {error.code_name} {error.strerror}"
        elif isinstance(result, Outcome) and result.tolerated:
            outcome = f"TOLERATED: {result.reason}"
        elif isinstance(result, Outcome):
            outcome = sanitize(result.value)
        else:
            outcome = sanitize(result)
        with self._lock:
            self._sequence += 1
            self._log.append(f"#{self._sequence} {name}({', '.join(shown)}) = {outcome}")
            if len(self._log) > MAX_TRACE_ENTRIES:
                del self._log[: len(self._log) - MAX_TRACE_ENTRIES]


def sanitize(value: Any) -> str:  # noqa: PLR0911
    """Render a value for trace display.

    Callable → ``<callable>``, long strings truncated, bytes →
    ``<N bytes>``, long lists/tuples/dicts truncated.
    """
    if callable(value):
        return "<callable>"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"<{len(value)} bytes>"
    if isinstance(value, str):
        if len(value) > _MAX_ARG_LEN:
            return f'"{value[:_MAX_ARG_LEN]}..."'
        return f'"{value}"'
    if isinstance(value, list):
        return _sanitize_sequence(value, "[", "]")  # pyright: ignore[reportUnknownArgumentType]
    if isinstance(value, tuple):
        return _sanitize_sequence(list(value), "(", ")")  # pyright: ignore[reportUnknownArgumentType]
    if isinstance(value, dict):
        return _sanitize_dict(value)  # pyright: ignore[reportUnknownArgumentType]
    return str(value)


def _sanitize_sequence(items: list[Any], open_br: str, close_br: str) -> str:
    """Sanitize a list for display, truncating if long."""
    if len(items) > _MAX_LIST_ITEMS:
        shown = ", ".join(sanitize(v) for v in items[:_MAX_LIST_ITEMS])
        return f"{open_br}{shown}, ...{close_br}"
    return f"{open_br}{', '.join(sanitize(v) for v in items)}{close_br}"


def _sanitize_dict(mapping: dict[Any, Any]) -> str:
    """Sanitize a dict for display, truncating if large."""
    entries = list(mapping.items())
    suffix = ", ..." if len(entries) > _MAX_LIST_ITEMS else ""
    shown = ", ".join(f"{sanitize(k)}: {sanitize(v)}" for k, v in entries[:_MAX_LIST_ITEMS])
    return "{" + shown + suffix + "}"
