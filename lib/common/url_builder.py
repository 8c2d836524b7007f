"""URL building utilities for URL shortener."""


def build_short_url(
    short_code: str,
    base_url: str,
    path_prefix: str = "",
) -> str:
    """Build complete short URL.

    Args:
        short_code: The short code
        base_url: Base URL (e.g., https://example.com)
        path_prefix: Optional path prefix (e.g., /s)

    Returns:
        Complete short URL
    """
    base = base_url.rstrip("/")
    prefix = path_prefix.strip("/")

    if prefix:
        return f"{base}/{prefix}/{short_code}"
    return f"{base}/{short_code}"


def join_path_prefixes(*prefixes: str) -> str:
    """Join path prefixes ('/edge', 's/') into one normalized prefix ('/edge/s')."""
    parts = [p.strip("/") for p in prefixes if p and p.strip("/")]
    return "/" + "/".join(parts) if parts else ""
