"""close(2): release one file descriptor.

Not restarted on EINTR: the descriptor may already be released, and a
second close could hit a descriptor another thread just opened."""

import os

from py_autodie.operation import operation

close = operation("close", os.close, restart=False)
