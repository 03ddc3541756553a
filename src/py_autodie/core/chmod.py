"""chmod(2): change the mode of one path."""

import os

from py_autodie.operation import operation

chmod = operation("chmod", os.chmod)
