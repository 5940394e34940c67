"""Validation utilities for shortlinks."""

import re
from urllib.parse import urlsplit

SLUG_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{3,50}$")

# RFC 3986 scheme: a letter followed by letters, digits, "+", "-" or "."
_SCHEME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9+.-]*$")


def is_valid_url(url: str) -> bool:
    """Validate an absolute URL.

    A URL is valid when it has a scheme and a host. Nothing is corrected:
    "example.com" is rejected rather than prefixed with a scheme.

    Args:
        url: The URL to validate

    Returns:
        True if the URL is absolute with scheme and host
    """
    if not url or not isinstance(url, str):
        return False

    if any(c.isspace() for c in url):
        return False

    try:
        result = urlsplit(url)
        # Accessing .port raises ValueError for out of range or non-numeric ports
        result.port
    except ValueError:
        return False

    if not result.scheme or not _SCHEME_PATTERN.match(result.scheme):
        return False

    return bool(result.hostname)


def is_valid_slug(slug: str) -> bool:
    """Validate a user-supplied slug.

    Args:
        slug: The slug to validate

    Returns:
        True if the whole string matches ``[a-zA-Z0-9_-]{3,50}``
    """
    if not isinstance(slug, str):
        return False
    return SLUG_PATTERN.fullmatch(slug) is not None
