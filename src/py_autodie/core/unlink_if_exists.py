"""unlink(2), tolerating a missing path (ENOENT)."""

from py_autodie.core.unlink import unlink
from py_autodie.errors import ENOENT

unlink_if_exists = unlink.tolerating("unlink_if_exists", ENOENT)
