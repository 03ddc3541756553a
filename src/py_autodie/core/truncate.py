"""truncate(2): resize the file at a path."""

import os

from py_autodie.operation import operation

truncate = operation("truncate", os.truncate)
