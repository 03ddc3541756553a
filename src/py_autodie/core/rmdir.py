"""rmdir(2): remove one empty directory."""

import os

from py_autodie.operation import operation

rmdir = operation("rmdir", os.rmdir)
