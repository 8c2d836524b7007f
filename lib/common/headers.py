"""Header parsing utilities for URL shortener."""

from typing import Mapping, Dict, Optional


def extract_forwarded_headers(headers: Mapping[str, str]) -> Dict[str, Optional[str]]:
    """Extract X-Forwarded-* headers from request.

    Args:
        headers: Request headers (any casing)

    Returns:
        Dictionary with forwarded_proto, forwarded_host, forwarded_for, forwarded_prefix
    """
    headers_lower = {k.lower(): v for k, v in headers.items()}

    return {
        "forwarded_proto": headers_lower.get("x-forwarded-proto"),
        "forwarded_host": headers_lower.get("x-forwarded-host"),
        "forwarded_for": headers_lower.get("x-forwarded-for"),
        "forwarded_prefix": headers_lower.get("x-forwarded-prefix"),
    }


def build_base_url(headers: Mapping[str, str], configured_base_url: str) -> str:
    """Base URL that short links are built on.

    A reverse proxy announcing itself with X-Forwarded-Proto and
    X-Forwarded-Host wins; otherwise the configured base URL is used.

    Returns:
        Base URL without trailing slash (e.g., https://example.com)
    """
    forwarded = extract_forwarded_headers(headers)

    if forwarded["forwarded_proto"] and forwarded["forwarded_host"]:
        # Proxies may append several values; the first is the client-facing one
        proto = forwarded["forwarded_proto"].split(",")[0].strip()
        host = forwarded["forwarded_host"].split(",")[0].strip()
        return f"{proto}://{host}"

    return configured_base_url.rstrip("/")


def get_forwarded_path_prefix(headers: Mapping[str, str]) -> str:
    """Path prefix from X-Forwarded-Prefix, normalized to '/prefix' or ''."""
    prefix = extract_forwarded_headers(headers)["forwarded_prefix"]
    if not prefix:
        return ""
    p = prefix.strip().strip("/")
    return "/" + p if p else ""
