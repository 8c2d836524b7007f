"""Data models for URL shortener."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class URLMapping:
    """Represents a short code -> original URL mapping in the store.

    Mappings are immutable once written; ttl_seconds is None when the
    mapping never expires.
    """

    short_code: str
    original_url: str
    ttl_seconds: Optional[int] = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "short_code": self.short_code,
            "original_url": self.original_url,
            "ttl_seconds": self.ttl_seconds,
        }
