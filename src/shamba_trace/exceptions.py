"""Custom exceptions for shamba-trace."""


class ShambaTraceError(Exception):
    """Base exception for shamba-trace."""

    pass


class InvalidInputError(ShambaTraceError):
    """Raised when a record is missing its identity field or cannot be read."""

    pass


class RenderError(ShambaTraceError):
    """Raised when a payload cannot be encoded as a QR image."""

    pass
