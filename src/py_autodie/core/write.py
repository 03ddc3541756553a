"""write(2): one write; returns the number of bytes written.

A short write is returned as-is, never looped."""

import os

from py_autodie.operation import operation

write = operation("write", os.write)
