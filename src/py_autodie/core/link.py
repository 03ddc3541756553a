"""link(2): create a hard link."""

import os

from py_autodie.operation import operation

link = operation("link", os.link)
