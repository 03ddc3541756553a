"""shutdown(2), tolerating an unconnected socket (ENOTCONN).

A falsy result means the socket was not connected."""

from py_autodie.core.shutdown import shutdown
from py_autodie.errors import ENOTCONN

shutdown_if_connected = shutdown.tolerating("shutdown_if_connected", ENOTCONN)
