"""bind(2): ``bind(sock, address)``."""

import socket

from py_autodie.operation import operation

bind = operation("bind", socket.socket.bind)
