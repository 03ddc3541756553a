"""kill(2): signal exactly one process."""

import os

from py_autodie.operation import operation

kill = operation("kill", os.kill)
