"""lseek(2): reposition a descriptor and return the new offset."""

import os

from py_autodie.operation import operation

lseek = operation("lseek", os.lseek)
