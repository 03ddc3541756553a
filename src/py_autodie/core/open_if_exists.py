"""open(2), tolerating a missing path (ENOENT)."""

from py_autodie.core.open import open as _open
from py_autodie.errors import ENOENT

open_if_exists = _open.tolerating("open_if_exists", ENOENT)
