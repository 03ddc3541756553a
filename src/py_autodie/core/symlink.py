"""symlink(2)."""

import os

from py_autodie.operation import operation

symlink = operation("symlink", os.symlink)
