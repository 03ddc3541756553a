"""send(2): one send; returns the number of bytes sent."""

import socket

from py_autodie.operation import operation

send = operation("send", socket.socket.send)
