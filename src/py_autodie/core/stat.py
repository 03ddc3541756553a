"""stat(2): follows symlinks."""

import os

from py_autodie.operation import operation

stat = operation("stat", os.stat)
