"""Abstract base class for URL shortener store implementations."""

from abc import ABC, abstractmethod
from typing import Optional, Dict

from .models import URLMapping


class URLStoreBase(ABC):
    """Repository over the two logical stores used by the shortener.

    The mapping store holds short code -> original URL entries; the
    counter store holds named integer counters. Implementations raise
    StoreUnavailableError when the backing store cannot be reached.
    """

    @abstractmethod
    async def save_mapping(
        self,
        short_code: str,
        original_url: str,
        ttl_seconds: Optional[int] = None,
    ) -> bool:
        """Store a new short URL mapping.

        Args:
            short_code: The short code to use
            original_url: The original long URL
            ttl_seconds: Optional expiry in seconds (None or 0 = never)

        Returns:
            True if stored, False if short_code already exists
        """
        pass

    @abstractmethod
    async def get_mapping(self, short_code: str) -> Optional[str]:
        """Get the original URL for a short code.

        Args:
            short_code: The short code to lookup

        Returns:
            The original URL if found, None otherwise
        """
        pass

    @abstractmethod
    async def get_url_mapping(self, short_code: str) -> Optional[URLMapping]:
        """Get the mapping together with its remaining lifetime.

        Args:
            short_code: The short code to lookup

        Returns:
            URLMapping or None if not found
        """
        pass

    @abstractmethod
    async def mapping_exists(self, short_code: str) -> bool:
        """Check if a short code already exists."""
        pass

    @abstractmethod
    async def increment_counter(self, name: str) -> int:
        """Atomically increment a counter in the counter store.

        Args:
            name: Counter key

        Returns:
            The counter value after the increment
        """
        pass

    @abstractmethod
    async def get_counter(self, name: str) -> int:
        """Read a counter (0 if it was never incremented)."""
        pass

    @abstractmethod
    async def health_check(self) -> Dict[str, bool]:
        """Check both logical stores.

        Returns:
            Dictionary with "mapping_store" and "counter_store" flags
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close store connections."""
        pass
