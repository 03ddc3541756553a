"""utime(2): set access and modification times of one path."""

import os

from py_autodie.operation import operation

utime = operation("utime", os.utime)
