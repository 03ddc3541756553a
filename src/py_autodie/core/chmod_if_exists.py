"""chmod(2), tolerating a missing path (ENOENT)."""

from py_autodie.core.chmod import chmod
from py_autodie.errors import ENOENT

chmod_if_exists = chmod.tolerating("chmod_if_exists", ENOENT)
