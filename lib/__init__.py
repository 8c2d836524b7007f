"""Core business logic for URL shortener."""

from .shortcode import ShortCodeGenerator
from .counter import VisitCounter
from .service import URLShortenerService

__all__ = ["ShortCodeGenerator", "VisitCounter", "URLShortenerService"]
