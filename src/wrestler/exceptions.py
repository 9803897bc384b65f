"""Exception hierarchy for wrestler.

All exceptions raised by wrestler itself inherit from :class:`WrestlerError`,
which carries an ``exit_code`` attribute mapped to a constant from
:mod:`wrestler.exit_codes`. The command-line entry point in
:func:`wrestler.app.main` catches ``WrestlerError`` and exits with the
appropriate code.

Subclass hierarchy::

    WrestlerError (exit 1)
    +-- InvalidUsageError   (exit 2)
    |   +-- ArityError      (exit 2)
    +-- TemplateError       (exit 7)
    +-- CodecError          (exit 8)
    |   +-- EncodeError
    |   +-- DecodeError
    +-- ConfigError         (exit 1)

Failures of the HTTP transport are *not* wrapped: they are httpx's own
exceptions and reach the caller unchanged. :data:`TransportError` is an
alias for their common base class so callers can catch them without
importing httpx.

Non-success status codes (404, 500, ...) are never turned into exceptions
here. They are data, interpreted by the installed response handler.
"""

import httpx

from wrestler.exit_codes import (
    EXIT_CODEC_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_TEMPLATE_ERROR,
)


TransportError = httpx.HTTPError


class WrestlerError(Exception):
    """Base exception for all wrestler errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(WrestlerError):
    """Raised for invalid command-line arguments or malformed call arguments."""

    exit_code = EXIT_INVALID_USAGE


class ArityError(InvalidUsageError):
    """Raised when an endpoint receives fewer URL values than its template needs.

    Also raised when the trailing key/value list has a dangling key.
    """


class TemplateError(WrestlerError):
    """Raised when a URL template contains a malformed placeholder token."""

    exit_code = EXIT_TEMPLATE_ERROR


class CodecError(WrestlerError):
    """Base class for JSON encoding and decoding failures."""

    exit_code = EXIT_CODEC_ERROR


class EncodeError(CodecError, TypeError):
    """Raised when a JSON payload contains a value that cannot be serialised."""


class DecodeError(CodecError, ValueError):
    """Raised when a response declared as JSON carries a malformed body."""


class ConfigError(WrestlerError):
    """Raised for configuration problems (missing profiles, invalid JSON, unknown handlers)."""

    exit_code = EXIT_GENERIC_FAILURE
