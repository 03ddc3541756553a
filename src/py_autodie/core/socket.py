"""socket(2): create one socket object."""

import socket as _socket

from py_autodie.operation import operation

socket = operation("socket", _socket.socket)
