"""rmdir(2), tolerating a missing path (ENOENT)."""

from py_autodie.core.rmdir import rmdir
from py_autodie.errors import ENOENT

rmdir_if_exists = rmdir.tolerating("rmdir_if_exists", ENOENT)
