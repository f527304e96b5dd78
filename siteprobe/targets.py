"""
Target URL validation.

Malformed targets are caller bugs, not network conditions, so they are
rejected before any probe starts.
"""

import re
from urllib.parse import urlparse

from .errors import InvalidTargetError

MAX_URL_LENGTH = 2048

_SCHEMES = ("http", "https")

# Registered names, IPv4 and unbracketed IPv6 literals (with an optional zone id)
_HOST_PATTERN = re.compile(r"[a-z0-9._\-:%]+", re.IGNORECASE)


def validate_url(url: str) -> str:
    """
    Validate and return the sanitised target URL.

    Raises:
        InvalidTargetError: If the URL is empty, too long, not http(s), or has
            a missing or malformed host.
    """
    if not isinstance(url, str):
        raise InvalidTargetError(f"Target must be a string, got {type(url).__name__}")

    url = url.strip()
    if not url:
        raise InvalidTargetError("Target must not be empty")
    if len(url) > MAX_URL_LENGTH:
        raise InvalidTargetError(f"Target exceeds maximum length ({MAX_URL_LENGTH} chars)")

    try:
        parsed = urlparse(url)
        # Accessing .port validates the port component
        parsed.port
    except ValueError as e:
        raise InvalidTargetError(f"Invalid target '{url}': {e}")

    if parsed.scheme not in _SCHEMES:
        raise InvalidTargetError(f"Invalid target '{url}': scheme must be http or https")
    if not parsed.hostname:
        raise InvalidTargetError(f"Invalid target '{url}': missing host")
    if not _HOST_PATTERN.fullmatch(parsed.hostname):
        raise InvalidTargetError(f"Invalid target '{url}': malformed host '{parsed.hostname}'")

    return url


def extract_hostname(url: str) -> str:
    """Return the host part of *url*, validating it first."""
    return urlparse(validate_url(url)).hostname


def is_https(url: str) -> bool:
    return urlparse(url.strip()).scheme == "https"
