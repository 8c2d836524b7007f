"""Business logic service for URL shortener."""

import logging
from typing import Optional, Dict, Any
from datetime import datetime, timezone

from .shortcode import ShortCodeGenerator
from .counter import VisitCounter
from .database.base import URLStoreBase
from .database.models import URLMapping
from .common.validators import is_valid_url, is_valid_short_code, is_same_host
from .errors import (
    InvalidURLError,
    InvalidShortCodeError,
    ShortCodeConflictError,
    ShortCodeGenerationError,
    ShortCodeNotFoundError,
    StoreError,
    ValidationError,
)

SECONDS_PER_HOUR = 3600

# Ten years; Redis refuses expire times past its own limit
MAX_EXPIRY_HOURS = 24 * 365 * 10


class URLShortenerService:
    """Service layer for shortening and resolving URLs."""

    def __init__(
        self,
        store: URLStoreBase,
        counter: VisitCounter,
        short_code_generator: Optional[ShortCodeGenerator] = None,
        logger: Optional[logging.Logger] = None,
        base_url: Optional[str] = None,
        enable_custom_codes: bool = True,
        max_collision_retries: int = 5,
        default_expiry_hours: int = 0,
    ):
        """Initialize URL shortener service.

        Args:
            store: Mapping/counter store
            counter: Visit counter incremented on every resolve
            short_code_generator: Optional short code generator
            logger: Optional logger
            base_url: Public base URL of the service; URLs on that host are refused
            enable_custom_codes: Whether to allow custom short codes
            max_collision_retries: Maximum retries on collision
            default_expiry_hours: Expiry applied when a request gives none (0 = never)
        """
        self.store = store
        self.counter = counter
        self.generator = short_code_generator or ShortCodeGenerator()
        self.logger = logger or logging.getLogger(__name__)
        self.base_url = base_url
        self.enable_custom_codes = enable_custom_codes
        self.max_collision_retries = max_collision_retries
        self.default_expiry_hours = default_expiry_hours

    async def create_short_url(
        self,
        original_url: str,
        custom_code: Optional[str] = None,
        expiry_hours: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Create a new short URL.

        Args:
            original_url: The original long URL
            custom_code: Optional custom short code
            expiry_hours: Optional lifetime of the mapping (0 = never expire)

        Returns:
            Dictionary with short_code, original_url, expiry_hours, created_at

        Raises:
            InvalidURLError: If the URL is malformed or points at this service
            InvalidShortCodeError: If the custom code is rejected
            ShortCodeConflictError: If the custom code is already in use
            ShortCodeGenerationError: If no free code could be generated
            StoreUnavailableError: If the store cannot be reached
        """
        is_valid, error = is_valid_url(original_url)
        if not is_valid:
            raise InvalidURLError(f"Invalid URL: {error}")

        if self.base_url and is_same_host(original_url, self.base_url):
            raise InvalidURLError("Invalid URL: cannot shorten a link to this service")

        if expiry_hours is None:
            expiry_hours = self.default_expiry_hours
        if expiry_hours < 0:
            raise ValidationError("Invalid expiry: must be zero or a positive number of hours")
        if expiry_hours > MAX_EXPIRY_HOURS:
            raise ValidationError(f"Invalid expiry: must be at most {MAX_EXPIRY_HOURS} hours")
        ttl_seconds = expiry_hours * SECONDS_PER_HOUR or None

        if custom_code:
            if not self.enable_custom_codes:
                raise InvalidShortCodeError("Custom short codes are not enabled")

            is_valid, error = is_valid_short_code(custom_code)
            if not is_valid:
                raise InvalidShortCodeError(f"Invalid short code: {error}")

            if not await self.store.save_mapping(custom_code, original_url, ttl_seconds):
                raise ShortCodeConflictError(f"Short code '{custom_code}' already exists")

            short_code = custom_code
        else:
            short_code = await self._store_with_unique_short_code(original_url, ttl_seconds)

        self.logger.info(f"Created short URL: {short_code} -> {original_url}")

        return {
            "short_code": short_code,
            "original_url": original_url,
            "expiry_hours": expiry_hours,
            "created_at": datetime.now(timezone.utc),
        }

    async def resolve(self, short_code: str) -> str:
        """Look up the original URL for a short code.

        Does not touch the visit counter; see record_visit().

        Raises:
            ShortCodeNotFoundError: If the code has no mapping
            StoreUnavailableError: If the mapping store cannot be reached
        """
        original_url = await self.store.get_mapping(short_code)

        if original_url is None:
            self.logger.info(f"Short code not found: {short_code}")
            raise ShortCodeNotFoundError(f"Short code '{short_code}' not found")

        self.logger.debug(f"Resolved {short_code} -> {original_url}")
        return original_url

    async def record_visit(self) -> Optional[int]:
        """Increment the global visit counter, best effort.

        Failures are logged and swallowed so a broken counter store never
        changes the outcome of a redirect.

        Returns:
            The new counter value, or None if the increment failed
        """
        try:
            return await self.counter.increment()
        except StoreError as e:
            self.logger.warning(f"Visit counter increment failed (ignored): {e}")
            return None

    async def get_url_info(self, short_code: str) -> URLMapping:
        """Get the stored mapping for a short code.

        Raises:
            ShortCodeNotFoundError: If the code has no mapping
            StoreUnavailableError: If the mapping store cannot be reached
        """
        mapping = await self.store.get_url_mapping(short_code)
        if mapping is None:
            raise ShortCodeNotFoundError(f"Short code '{short_code}' not found")
        return mapping

    async def get_statistics(self) -> Dict[str, Any]:
        """Get service statistics."""
        return {
            "visits": await self.counter.value(),
            "counter_key": self.counter.default_key,
            "custom_codes_enabled": self.enable_custom_codes,
        }

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with mapping_store, counter_store and overall flags
        """
        status = await self.store.health_check()
        status["overall"] = all(status.values())
        return status

    async def _store_with_unique_short_code(self, original_url: str, ttl_seconds: Optional[int]) -> str:
        """Generate a short code and store the mapping under it.

        Codes are written with SET NX, so a collision simply means another
        draw; an existing mapping is never overwritten.

        Raises:
            ShortCodeGenerationError: If unable to store after retries
        """
        for attempt in range(self.max_collision_retries + 1):
            code = self.generator.generate_random()
            if await self.store.save_mapping(code, original_url, ttl_seconds):
                if attempt:
                    self.logger.debug(f"Generated code after {attempt + 1} attempts: {code}")
                return code
            self.logger.debug(f"Short code collision on {code}")

        # Last resort: a longer UUID-based code (highly unlikely to collide)
        code = self.generator.generate_from_uuid(length=self.generator.default_length + 2)
        if await self.store.save_mapping(code, original_url, ttl_seconds):
            return code

        raise ShortCodeGenerationError("Unable to generate unique short code after multiple attempts")

    async def close(self) -> None:
        """Close store connections."""
        await self.store.close()
