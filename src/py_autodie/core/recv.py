"""recv(2): one receive of at most *bufsize* bytes."""

import socket

from py_autodie.operation import operation

recv = operation("recv", socket.socket.recv)
