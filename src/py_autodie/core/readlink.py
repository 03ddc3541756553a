"""readlink(2)."""

import os

from py_autodie.operation import operation

readlink = operation("readlink", os.readlink)
