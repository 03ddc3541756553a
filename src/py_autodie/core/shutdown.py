"""shutdown(2): ``shutdown(sock, how)``."""

import socket

from py_autodie.operation import operation

shutdown = operation("shutdown", socket.socket.shutdown)
