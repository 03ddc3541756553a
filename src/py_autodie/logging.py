"""Audit log for operation resolution and calls.

The dispatcher records what it resolved and every call that failed or
was tolerated.  It is the in-memory equivalent of a kernel log buffer:

- **LogLevel** — severity levels ordered for filtering (DEBUG < ERROR).
- **LogEntry** — a single structured record (level, message, source,
  operation).
- **Logger** — a bounded log with filtering and clearing.  Once full,
  the oldest entries are evicted first, like a kernel ring buffer.

Design choices:
    - **IntEnum for levels** so they compare naturally with ``<``.
    - **Frozen dataclass for entries** — log records should be immutable.
    - **Filter returns a list, not a generator** — the log is typically
      small and callers usually want to iterate multiple times.
"""

import threading
from dataclasses import dataclass
from enum import IntEnum

MAX_LOG_ENTRIES = 1000


class LogLevel(IntEnum):
    """Severity levels for log entries."""

    DEBUG = 0
    INFO = 1
    WARNING = 2
    ERROR = 3


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The component that generated the event (e.g. "dispatcher").
        operation: The operation identifier involved, if any.

    """

    level: LogLevel
    message: str
    source: str
    operation: str | None = None

    def __str__(self) -> str:
        """Format as ``[LEVEL] source: message``."""
        return f"[{self.level.name}] {self.source}: {self.message}"


class Logger:
    """Bounded log buffer with filtering.

    Appends are serialized so concurrent resolutions never lose entries.
    At most *max_entries* are kept.
    """

    def __init__(self, max_entries: int = MAX_LOG_ENTRIES) -> None:
        """Create an empty logger holding at most *max_entries* records."""
        self._max_entries = max_entries
        self._entries: list[LogEntry] = []
        self._lock = threading.Lock()

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        operation: str | None = None,
    ) -> None:
        """Append a new entry to the log.

        Args:
            level: Severity of the event.
            message: Human-readable event description.
            source: Component that generated the event.
            operation: Operation identifier associated with the event.

        """
        entry = LogEntry(level=level, message=message, source=source, operation=operation)
        with self._lock:
            self._entries.append(entry)
            if len(self._entries) > self._max_entries:
                del self._entries[: len(self._entries) - self._max_entries]

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
        operation: str | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this source.
            operation: If set, only return entries about this operation.

        Returns:
            A filtered list of log entries.

        """
        result = list(self._entries)
        if min_level is not None:
            result = [e for e in result if e.level >= min_level]
        if source is not None:
            result = [e for e in result if e.source == source]
        if operation is not None:
            result = [e for e in result if e.operation == operation]
        return result

    def clear(self) -> None:
        """Remove all log entries."""
        with self._lock:
            self._entries.clear()
