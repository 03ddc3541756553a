"""open(2): open one path and return a file descriptor."""

import os

from py_autodie.operation import operation

open = operation("open", os.open)  # noqa: A001
