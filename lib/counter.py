"""Visit counter service."""

import logging
from typing import Optional

from .database.base import URLStoreBase


class VisitCounter:
    """Named counters kept in the counter store.

    The resolver only uses the default key; increments rely on the
    store's atomic INCR, so no in-process locking is needed.
    """

    def __init__(
        self,
        store: URLStoreBase,
        default_key: str = "counter",
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.default_key = default_key
        self.logger = logger or logging.getLogger(__name__)

    async def increment(self, key: Optional[str] = None) -> int:
        """Increment a counter and return its new value.

        Raises:
            StoreUnavailableError: If the counter store cannot be reached
        """
        key = key or self.default_key
        value = await self.store.increment_counter(key)
        self.logger.debug(f"Counter {key} -> {value}")
        return value

    async def value(self, key: Optional[str] = None) -> int:
        """Current value of a counter (0 if never incremented)."""
        return await self.store.get_counter(key or self.default_key)
