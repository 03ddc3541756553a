"""mkdir(2)."""

import os

from py_autodie.operation import operation

mkdir = operation("mkdir", os.mkdir)
