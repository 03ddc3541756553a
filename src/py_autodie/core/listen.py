"""listen(2): ``listen(sock, backlog)``."""

import socket

from py_autodie.operation import operation

listen = operation("listen", socket.socket.listen)
