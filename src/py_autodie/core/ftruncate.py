"""ftruncate(2): resize the file behind a descriptor."""

import os

from py_autodie.operation import operation

ftruncate = operation("ftruncate", os.ftruncate)
