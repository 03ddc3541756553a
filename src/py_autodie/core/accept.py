"""accept(2): ``accept(sock)`` returns ``(conn, address)``."""

import socket

from py_autodie.operation import operation

accept = operation("accept", socket.socket.accept)
