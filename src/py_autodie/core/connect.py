"""connect(2): ``connect(sock, address)``."""

import socket

from py_autodie.operation import operation

connect = operation("connect", socket.socket.connect)
