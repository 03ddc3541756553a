"""read(2): one read of at most *n* bytes."""

import os

from py_autodie.operation import operation

read = operation("read", os.read)
