"""Redis implementation for URL shortener.

Two logical Redis databases are used: one holds short code -> URL
mappings, the other holds the global visit counter. Each operation runs
on a connection scoped to the call and released on exit.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional, Dict, AsyncIterator
from urllib.parse import urlparse, unquote

import redis.asyncio as redis
from redis.exceptions import RedisError, ResponseError

from .base import URLStoreBase
from .models import URLMapping
from ..errors import StoreError, StoreUnavailableError


MAPPING_STORE = "mapping"
COUNTER_STORE = "counter"


class URLShortenerRedisStore(URLStoreBase):
    """Redis implementation for URL shortener store operations."""

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379",
        mapping_db: int = 0,
        counter_db: int = 1,
        password: Optional[str] = None,
        socket_timeout: float = 5.0,
        mapping_client: Optional[redis.Redis] = None,
        counter_client: Optional[redis.Redis] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Redis store.

        Either pass connection settings, or pre-built clients for one or
        both partitions. Injected clients are used as-is and are not closed
        by close().

        Args:
            redis_url: Redis connection URL (redis:// or rediss://)
            mapping_db: Logical database for short URL mappings
            counter_db: Logical database for the visit counter
            password: Optional password (overrides the one in redis_url)
            socket_timeout: Connect/read timeout in seconds
            mapping_client: Pre-initialized client for the mapping store
            counter_client: Pre-initialized client for the counter store
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.redis_url = redis_url
        self.socket_timeout = socket_timeout
        self._dbs = {MAPPING_STORE: mapping_db, COUNTER_STORE: counter_db}

        self._parse_connection_string(redis_url)
        if password is not None:
            self.password = password

        self._clients: Dict[str, redis.Redis] = {}
        if mapping_client is not None:
            self._clients[MAPPING_STORE] = mapping_client
        if counter_client is not None:
            self._clients[COUNTER_STORE] = counter_client

        self._pools: Dict[str, redis.ConnectionPool] = {}

    def _parse_connection_string(self, redis_url: str) -> None:
        """Parse Redis connection URL."""
        parsed = urlparse(redis_url)

        self.use_ssl = parsed.scheme == "rediss"
        self.host = parsed.hostname or "localhost"
        self.port = parsed.port or 6379
        self.username = unquote(parsed.username) if parsed.username else None
        self.password = unquote(parsed.password) if parsed.password else None

        self.logger.debug(
            f"Parsed connection: host={self.host}, port={self.port}, "
            f"mapping_db={self._dbs[MAPPING_STORE]}, counter_db={self._dbs[COUNTER_STORE]}"
        )

    def describe(self, store: str) -> str:
        """Human-readable location of a logical store (host:port/db)."""
        return f"{self.host}:{self.port}/{self._dbs[store]}"

    async def connect(self) -> None:
        """Create connection pools for both logical stores."""
        for store in (MAPPING_STORE, COUNTER_STORE):
            if store not in self._clients:
                self._get_pool(store)
        self.logger.info(
            f"Redis store ready: mappings at {self.describe(MAPPING_STORE)}, "
            f"counter at {self.describe(COUNTER_STORE)}"
        )

    def _get_pool(self, store: str) -> redis.ConnectionPool:
        """Get or create the connection pool of a logical store."""
        if store not in self._pools:
            connection_class = redis.SSLConnection if self.use_ssl else redis.Connection
            self._pools[store] = redis.ConnectionPool(
                connection_class=connection_class,
                host=self.host,
                port=self.port,
                db=self._dbs[store],
                username=self.username,
                password=self.password,
                socket_timeout=self.socket_timeout,
                socket_connect_timeout=self.socket_timeout,
                decode_responses=True,
            )
            self.logger.debug(f"Created connection pool for {store} store ({self.describe(store)})")
        return self._pools[store]

    @asynccontextmanager
    async def _get_connection(self, store: str) -> AsyncIterator[redis.Redis]:
        """Acquire a client for one logical store, released on exit.

        A command Redis rejects surfaces as StoreError; any other Redis
        failure (refused connection, timeout) as StoreUnavailableError.
        """
        try:
            client = self._clients.get(store)
            if client is not None:
                yield client
            else:
                async with redis.Redis(connection_pool=self._get_pool(store)) as conn:
                    yield conn
        except ResponseError as e:
            raise StoreError(f"Redis at {self.describe(store)} rejected the command: {e}") from e
        except RedisError as e:
            raise StoreUnavailableError(f"Can't connect to Redis at {self.describe(store)}.") from e

    async def save_mapping(
        self,
        short_code: str,
        original_url: str,
        ttl_seconds: Optional[int] = None,
    ) -> bool:
        """Store a new mapping with SET NX so existing codes are never overwritten.

        Args:
            short_code: The short code to use
            original_url: The original long URL
            ttl_seconds: Optional expiry in seconds (None or 0 = never)

        Returns:
            True if stored, False if short_code already exists
        """
        async with self._get_connection(MAPPING_STORE) as conn:
            created = await conn.set(short_code, original_url, ex=ttl_seconds or None, nx=True)

        if not created:
            self.logger.debug(f"Short code already exists: {short_code}")
            return False

        self.logger.debug(f"Stored mapping {short_code} -> {original_url} (ttl={ttl_seconds or 'none'})")
        return True

    async def get_mapping(self, short_code: str) -> Optional[str]:
        """Get the original URL for a short code."""
        async with self._get_connection(MAPPING_STORE) as conn:
            return await conn.get(short_code)

    async def get_url_mapping(self, short_code: str) -> Optional[URLMapping]:
        """Get a mapping and its remaining TTL in a single transaction."""
        async with self._get_connection(MAPPING_STORE) as conn:
            async with conn.pipeline(transaction=True) as pipe:
                pipe.get(short_code)
                pipe.ttl(short_code)
                original_url, ttl = await pipe.execute()

        if original_url is None:
            return None

        # TTL is -1 for keys without expiry
        return URLMapping(
            short_code=short_code,
            original_url=original_url,
            ttl_seconds=ttl if ttl is not None and ttl >= 0 else None,
        )

    async def mapping_exists(self, short_code: str) -> bool:
        """Check if a short code already exists."""
        async with self._get_connection(MAPPING_STORE) as conn:
            return await conn.exists(short_code) > 0

    async def increment_counter(self, name: str) -> int:
        """Atomically increment a counter (INCR) in the counter store."""
        async with self._get_connection(COUNTER_STORE) as conn:
            return await conn.incr(name)

    async def get_counter(self, name: str) -> int:
        """Read a counter (0 if it was never incremented)."""
        async with self._get_connection(COUNTER_STORE) as conn:
            value = await conn.get(name)
        return int(value) if value is not None else 0

    async def health_check(self) -> Dict[str, bool]:
        """PING both logical stores."""
        status = {}
        for store in (MAPPING_STORE, COUNTER_STORE):
            try:
                async with self._get_connection(store) as conn:
                    await conn.ping()
                status[f"{store}_store"] = True
            except StoreError as e:
                self.logger.error(f"Health check failed for {store} store: {e}")
                status[f"{store}_store"] = False
        return status

    async def close(self) -> None:
        """Disconnect the connection pools owned by this store."""
        for store, pool in self._pools.items():
            try:
                await pool.disconnect()
                self.logger.debug(f"Closed connection pool for {store} store")
            except RedisError as e:
                self.logger.error(f"Error closing pool for {store} store: {e}")

        self._pools.clear()
