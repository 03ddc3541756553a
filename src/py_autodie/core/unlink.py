"""unlink(2): remove one directory entry."""

import os

from py_autodie.operation import operation

unlink = operation("unlink", os.unlink)
