"""Operation catalog: one unit module per operation identifier.

The dispatcher loads ``py_autodie.core.<identifier>`` on first use and
takes the ``Operation`` bound to the attribute of the same name.  This
package therefore never imports its units itself.

Rules for adding a unit:

- Perform a **single** system call.  That is the only way every
  failure can be reported reliably, so no unit accepts several targets.
- Mirror the signature of the analogous ``os`` / ``socket`` call.
- Raise on every error unless the name says what is tolerated (e.g.
  ``unlink_if_exists`` tolerates ENOENT), and derive such variants with
  ``Operation.tolerating`` so the tolerated code stays distinguishable.

``EXCLUDED`` lists primitives that are deliberately not offered.
"""

EXCLUDED: dict[str, str] = {
    "readline": "line reading buffers and loops over many reads",
    "readdir": "directory iteration loops over many reads",
    "chdir": "the working directory is process-wide state",
    "select": "multiplexing waits on many descriptors at once",
    "fork": "process creation needs more than one call to do safely",
    "exec": "program execution needs more than one call to do safely",
    "system": "runs a shell and many system calls",
    "readpipe": "runs a shell and many system calls",
    "tell": "does not report OS errors",
    "pipe": "only fails when descriptors are exhausted",
}
