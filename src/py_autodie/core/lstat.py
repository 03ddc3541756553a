"""lstat(2): does not follow symlinks."""

import os

from py_autodie.operation import operation

lstat = operation("lstat", os.lstat)
