"""Validation utilities for URL shortener."""

import re
from urllib.parse import urlparse
from typing import Optional, Tuple

MAX_URL_LENGTH = 2048

DEFAULT_PORTS = {"http": 80, "https": 443}

SHORT_CODE_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')

# Paths the service routes itself; a short code must never shadow them
RESERVED_SHORT_CODES = frozenset({
    "api", "health", "admin", "static", "assets", "favicon",
    "robots", "sitemap", "docs", "redoc", "openapi", "stats",
})


def is_valid_url(url: str) -> Tuple[bool, str]:
    """Validate a URL to shorten.

    Args:
        url: The URL to validate

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not url or not isinstance(url, str):
        return False, "URL is required"

    if len(url) > MAX_URL_LENGTH:
        return False, f"URL is too long (max {MAX_URL_LENGTH} characters)"

    if any(c.isspace() for c in url):
        return False, "URL must not contain whitespace"

    try:
        result = urlparse(url)
        # Accessing .port validates it
        result.port
    except ValueError as e:
        return False, f"Invalid URL format: {e}"

    if result.scheme not in ("http", "https"):
        return False, "URL must use http or https protocol"

    hostname = result.hostname
    if not hostname:
        return False, "URL must have a valid domain"

    if "." not in hostname and hostname != "localhost":
        return False, "URL must have a valid domain"

    return True, ""


def is_same_host(url: str, base_url: str) -> bool:
    """Whether url points at the host serving short links (base_url).

    A leading "www." is ignored on both sides. Ports are compared only when
    either URL names one, so http://localhost:8080 is not the same host as
    http://localhost:3000.
    """
    parsed = urlparse(url)
    own = urlparse(base_url)
    host = (parsed.hostname or "").lower()
    own_host = (own.hostname or "").lower()
    if not host or not own_host:
        return False
    if host.removeprefix("www.") != own_host.removeprefix("www."):
        return False

    if parsed.port is None and own.port is None:
        return True
    return _effective_port(parsed) == _effective_port(own)


def _effective_port(parsed) -> Optional[int]:
    return parsed.port or DEFAULT_PORTS.get(parsed.scheme)


def is_valid_short_code(short_code: str, min_length: int = 4, max_length: int = 20) -> Tuple[bool, str]:
    """Validate a custom short code.

    Args:
        short_code: The short code to validate
        min_length: Minimum length for short code
        max_length: Maximum length for short code

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not short_code or not isinstance(short_code, str):
        return False, "Short code is required"

    if len(short_code) < min_length:
        return False, f"Short code must be at least {min_length} characters"

    if len(short_code) > max_length:
        return False, f"Short code must be at most {max_length} characters"

    if not SHORT_CODE_PATTERN.match(short_code):
        return False, "Short code can only contain letters, numbers, hyphens, and underscores"

    if short_code.lower() in RESERVED_SHORT_CODES:
        return False, f"'{short_code}' is a reserved word and cannot be used"

    return True, ""
