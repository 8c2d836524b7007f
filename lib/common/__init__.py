"""Common utilities for URL shortener."""

from .validators import is_valid_url, is_valid_short_code, is_same_host
from .headers import extract_forwarded_headers, build_base_url, get_forwarded_path_prefix
from .url_builder import build_short_url, join_path_prefixes
from .logging_config import setup_logging, get_logger

__all__ = [
    "is_valid_url",
    "is_valid_short_code",
    "is_same_host",
    "extract_forwarded_headers",
    "build_base_url",
    "get_forwarded_path_prefix",
    "build_short_url",
    "join_path_prefixes",
    "setup_logging",
    "get_logger",
]
