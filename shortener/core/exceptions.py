"""
Custom Exceptions

This module defines the error taxonomy of the shortener.

Every exception carries:
- error_code: stable classification string sent to API consumers
- status_code: HTTP status the transport layer maps it to

Validation and decoding errors are raised before any storage access.
Storage errors are never retried here; they propagate to the caller.
"""

from typing import Optional


class ShortenerError(Exception):
    """Base exception for the URL shortener."""

    error_code = "ShortenerError"
    status_code = 500


class InvalidUrlFormatError(ShortenerError):
    """Raised when a submitted URL is not a valid absolute URL."""

    error_code = "InvalidUrlFormat"
    status_code = 400

    def __init__(self, url: object, reason: str = "Invalid URL format"):
        self.url = url
        self.reason = reason
        super().__init__(f"{reason}: {url!r}")


class InvalidCharacterError(ShortenerError):
    """Raised by the codec when a token holds a symbol outside the alphabet."""

    error_code = "MalformedToken"
    status_code = 400

    def __init__(self, character: str, position: int):
        self.character = character
        self.position = position
        super().__init__(f"Invalid character {character!r} at position {position}")


class MalformedTokenError(ShortenerError):
    """Raised when a token cannot be decoded into an identifier."""

    error_code = "MalformedToken"
    status_code = 400

    def __init__(self, token: str, reason: str = "Malformed token"):
        self.token = token
        self.reason = reason
        super().__init__(f"{reason}: {token!r}")


class NotFoundError(ShortenerError):
    """Raised when no stored URL exists for an identifier."""

    error_code = "NotFound"
    status_code = 404

    def __init__(self, identifier: Optional[int], token: Optional[str] = None):
        self.identifier = identifier
        self.token = token
        if token is None:
            super().__init__(f"No URL stored for identifier {identifier}")
        else:
            super().__init__(f"No URL stored for token {token!r}")


class StorageError(ShortenerError):
    """Raised when the persistence layer fails."""

    error_code = "StorageError"
    status_code = 500

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        self.original_error = original_error
        super().__init__(f"Storage error: {message}")


class DuplicateUrlError(StorageError):
    """Raised by a store enforcing unique URLs when the URL already has a row."""

    def __init__(self, long_url: str, original_error: Optional[BaseException] = None):
        self.long_url = long_url
        super().__init__(f"URL already stored: {long_url!r}", original_error=original_error)
