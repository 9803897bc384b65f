"""Numeric process exit codes for the ``wrestler`` command line.

Each constant maps to a specific error category and is referenced by the
corresponding :class:`~wrestler.exceptions.WrestlerError` subclass.
Shell scripts can inspect the exit code to tell a bad template from an
unreachable server without parsing stderr.

Example::

    $ wrestler call GET 'items/$id'
    $ echo $?
    2   # EXIT_INVALID_USAGE -- the template needs one URL value
"""

EXIT_GENERIC_FAILURE = 1
"""An unclassified error occurred."""

EXIT_INVALID_USAGE = 2
"""The command was invoked with invalid arguments or a wrong number of URL values."""

EXIT_CONNECTION_ERROR = 6
"""A network-level error occurred (timeout, DNS failure, connection refused)."""

EXIT_TEMPLATE_ERROR = 7
"""A URL template contains a malformed placeholder."""

EXIT_CODEC_ERROR = 8
"""A request payload could not be encoded or a response body could not be decoded."""
