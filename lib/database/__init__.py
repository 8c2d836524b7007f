"""Store layer for URL shortener."""

from .base import URLStoreBase
from .redis_store import URLShortenerRedisStore, MAPPING_STORE, COUNTER_STORE
from .models import URLMapping

__all__ = [
    "URLStoreBase",
    "URLShortenerRedisStore",
    "URLMapping",
    "MAPPING_STORE",
    "COUNTER_STORE",
]
