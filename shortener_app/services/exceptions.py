"""
Exceptions raised by the URL service.

Each class is one error kind the web layer can map to a response status.
Storage-side exceptions never leave the service layer: they are translated
into ShortCodeExistsError, ShortCodeNotFoundError or DatabaseError.
"""

from typing import Optional


class ShortenerError(Exception):
    """Base exception for all service-level errors."""
    pass


class URLValidationError(ShortenerError):
    """The submitted long URL failed validation."""
    pass


class EmptyURLError(URLValidationError):
    """The long URL is empty after trimming whitespace."""

    def __init__(self, message: str = "empty strings are not allowed"):
        super().__init__(message)


class URLTooLongError(URLValidationError):
    """The long URL exceeds the maximum allowed length."""

    def __init__(self, length: int, max_length: int):
        self.length = length
        self.max_length = max_length
        super().__init__(
            f"URL is too long: {length} characters (max {max_length})"
        )


class ShortCodeGenerationError(ShortenerError):
    """The entropy source could not supply the bytes for a short code."""
    pass


class ShortCodeExistsError(ShortenerError):
    """A generated short code is already taken."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"short code already exists: {short_code}")


class ShortCodeNotFoundError(ShortenerError):
    """No mapping is stored for the short code."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"short code not found: {short_code!r}")


class InvalidShortCodeError(ShortenerError):
    """The short code does not have the shape of a generated code."""

    def __init__(self, short_code: str):
        self.short_code = short_code
        super().__init__(f"invalid short code: {short_code!r}")


class DatabaseError(ShortenerError):
    """
    Any storage failure other than a short code conflict or a missing record.

    The underlying exception is kept on `cause` and chained as __cause__.
    """

    def __init__(self, cause: Optional[BaseException] = None):
        self.cause = cause
        message = "database access error"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
