"""mkdir(2), tolerating an existing path (EEXIST).

A falsy result means *something* already occupies the path; it is not
necessarily a directory."""

from py_autodie.core.mkdir import mkdir
from py_autodie.errors import EEXIST

mkdir_if_not_exists = mkdir.tolerating("mkdir_if_not_exists", EEXIST)
