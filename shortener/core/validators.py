"""
Input Validators

This module provides the gate every submitted URL passes before storage.

Validated URLs are returned verbatim. Nothing here normalizes input:
two textually different URLs stay two different URLs.
"""

from typing import Iterable
from urllib.parse import urlsplit

from shortener.core.exceptions import InvalidUrlFormatError

DEFAULT_SCHEMES = frozenset({"http", "https"})
MAX_URL_LENGTH = 2048  # RFC 7230 recommendation


def validate_url(
    url: str,
    allowed_schemes: Iterable[str] = DEFAULT_SCHEMES,
    max_length: int = MAX_URL_LENGTH,
) -> str:
    """
    Check that url is an absolute URL with a recognized scheme and a host.

    Args:
        url: The URL string to validate
        allowed_schemes: Lower-case scheme names that are accepted
        max_length: Maximum allowed length

    Returns:
        The URL, unchanged

    Raises:
        InvalidUrlFormatError: If the URL is rejected
    """
    if not isinstance(url, str) or not url:
        raise InvalidUrlFormatError(url, reason="URL must be a non-empty string")

    if len(url) > max_length:
        raise InvalidUrlFormatError(url, reason=f"URL longer than {max_length} characters")

    if any(char.isspace() or ord(char) < 32 or ord(char) == 127 for char in url):
        raise InvalidUrlFormatError(url, reason="URL contains whitespace or control characters")

    try:
        parts = urlsplit(url)
        # .port raises ValueError for out-of-range or non-numeric ports
        port = parts.port
    except ValueError as e:
        raise InvalidUrlFormatError(url, reason=f"Invalid URL format ({e})") from e

    schemes = {scheme.lower() for scheme in allowed_schemes}
    if not parts.scheme or parts.scheme.lower() not in schemes:
        raise InvalidUrlFormatError(
            url,
            reason=f"URL scheme must be one of: {', '.join(sorted(schemes))}",
        )

    if not parts.netloc or not parts.hostname:
        raise InvalidUrlFormatError(url, reason="URL must include a host")

    if port is None and parts.netloc.endswith(":"):
        raise InvalidUrlFormatError(url, reason="URL has an empty port")

    return url

