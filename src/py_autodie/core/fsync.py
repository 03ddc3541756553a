"""fsync(2)."""

import os

from py_autodie.operation import operation

fsync = operation("fsync", os.fsync)
