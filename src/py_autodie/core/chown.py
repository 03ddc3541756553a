"""chown(2): change the owner of one path."""

import os

from py_autodie.operation import operation

chown = operation("chown", os.chown)
