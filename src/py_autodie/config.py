"""Settings — which operations to preload, read from the environment.

A program can declare the operations it will use before it runs, the
way a module imports names up front::

    PY_AUTODIE_PRELOAD="open, close, unlink_if_exists"
    PY_AUTODIE_TRACE=1

Both variables are optional.  Settings are read once, when the package
builds its default dispatcher; a ``Settings`` object can also be built
directly and handed to ``Dispatcher.from_settings``.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping
from dataclasses import dataclass

PRELOAD_VAR = "PY_AUTODIE_PRELOAD"
TRACE_VAR = "PY_AUTODIE_TRACE"

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_SEPARATORS = re.compile(r"[\s,]+")


def parse_names(raw: str | None) -> tuple[str, ...]:
    """Split a comma/whitespace separated list, dropping blanks and repeats."""
    if not raw:
        return ()
    names = [n for n in _SEPARATORS.split(raw) if n]
    return tuple(dict.fromkeys(names))


def parse_flag(raw: str | None) -> bool:
    """Interpret an environment flag (``1``, ``true``, ``yes``, ``on``)."""
    return raw is not None and raw.strip().lower() in _TRUTHY


@dataclass(frozen=True)
class Settings:
    """Dispatcher start-up configuration.

    Attributes:
        preload: Identifiers to resolve immediately, in order.
        trace: Whether call tracing starts enabled.

    """

    preload: tuple[str, ...] = ()
    trace: bool = False

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Read settings from *environ* (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        return cls(
            preload=parse_names(env.get(PRELOAD_VAR)),
            trace=parse_flag(env.get(TRACE_VAR)),
        )
