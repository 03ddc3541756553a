"""rename(2)."""

import os

from py_autodie.operation import operation

rename = operation("rename", os.rename)
