"""setsockopt(2): ``setsockopt(sock, level, option, value)``."""

import socket

from py_autodie.operation import operation

setsockopt = operation("setsockopt", socket.socket.setsockopt)
