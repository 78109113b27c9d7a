"""Error types raised by the presenter core.

All errors are raised synchronously to the caller of a command. The HTTP
layer maps them to status codes and the CLI prints them.
"""


class PresenterError(Exception):
    """Base class for presenter errors."""

    status_code = 400


class NotFoundError(PresenterError):
    """Referenced schedule, entry or content does not exist."""

    status_code = 404


class ValidationError(PresenterError):
    """Malformed input, e.g. unknown item type or a bad reorder set."""

    status_code = 422


class InvalidStateError(PresenterError):
    """Command not allowed in the current presentation state."""

    status_code = 409
