"""Exceptions raised by the URL shortener core.

Classes:
    ShortenerError:
        Generic base class for URL shortener exceptions.

    ValidationError:
        Raised when client input is malformed. Also a ValueError.

    InvalidURLError:
        Raised when the URL to shorten is not a well-formed http(s) URL.

    InvalidShortCodeError:
        Raised when a custom short code is rejected.

    ShortCodeNotFoundError:
        Raised when a short code has no mapping in the store.

    ShortCodeConflictError:
        Raised when a custom short code is already in use.

    ShortCodeGenerationError:
        Raised when no free short code could be generated.

    StoreError:
        Raised when the key-value store fails.

    StoreUnavailableError:
        Raised when the key-value store cannot be reached or times out.

Example:
    >>> from lib.errors import ShortCodeNotFoundError
    >>> raise ShortCodeNotFoundError("Short code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    lib.errors.ShortCodeNotFoundError: Short code 'abc123' not found.
"""


class ShortenerError(Exception):
    """Generic base class for URL shortener exceptions."""

    pass


class ValidationError(ShortenerError, ValueError):
    """Exception raised when client input fails validation."""

    pass


class InvalidURLError(ValidationError):
    """Exception raised when the URL to shorten is malformed."""

    pass


class InvalidShortCodeError(ValidationError):
    """Exception raised when a custom short code is not acceptable."""

    pass


class ShortCodeNotFoundError(ShortenerError):
    """Exception raised when a short code has no mapping in the store."""

    pass


class ShortCodeConflictError(ShortenerError):
    """Exception raised when a custom short code is already in use."""

    pass


class ShortCodeGenerationError(ShortenerError):
    """Exception raised when every generated short code collided."""

    pass


class StoreError(ShortenerError):
    """Exception raised when there is an error in the key-value store."""

    pass


class StoreUnavailableError(StoreError):
    """Exception raised when the key-value store is unreachable.

    e.g. connection refused, timeouts, authentication failures, etc.
    """

    pass
