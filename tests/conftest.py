"""Pytest configuration and fixtures."""

import pytest
from typing import AsyncGenerator, Dict, Optional

from httpx import AsyncClient, ASGITransport
from redis.exceptions import ConnectionError as RedisConnectionError

from config import Config
from lib.counter import VisitCounter
from lib.database.redis_store import URLShortenerRedisStore
from lib.service import URLShortenerService
from lib.shortcode import ShortCodeGenerator
from lib.common.logging_config import setup_logging
from web_app import create_app


class FakeRedis:
    """In-memory stand-in for one logical redis.asyncio database.

    Set ``fail = True`` to make every command raise a Redis ConnectionError.
    """

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.expiry: Dict[str, int] = {}
        self.fail = False

    def _check(self):
        if self.fail:
            raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")

    async def get(self, key: str) -> Optional[str]:
        self._check()
        return self.data.get(key)

    async def set(self, key: str, value, ex: Optional[int] = None, nx: bool = False):
        self._check()
        if nx and key in self.data:
            return None
        self.data[key] = str(value)
        if ex:
            self.expiry[key] = int(ex)
        else:
            self.expiry.pop(key, None)
        return True

    async def incr(self, key: str) -> int:
        self._check()
        value = int(self.data.get(key, 0)) + 1
        self.data[key] = str(value)
        return value

    async def exists(self, *keys: str) -> int:
        self._check()
        return sum(1 for key in keys if key in self.data)

    async def ttl(self, key: str) -> int:
        self._check()
        if key not in self.data:
            return -2
        return self.expiry.get(key, -1)

    async def ping(self) -> bool:
        self._check()
        return True

    def pipeline(self, transaction: bool = True) -> "FakePipeline":
        return FakePipeline(self)


class FakePipeline:
    """Buffers get/ttl calls and runs them on execute()."""

    def __init__(self, client: FakeRedis):
        self.client = client
        self.commands = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.commands = []

    def get(self, key: str):
        self.commands.append((self.client.get, key))
        return self

    def ttl(self, key: str):
        self.commands.append((self.client.ttl, key))
        return self

    async def execute(self):
        self.client._check()
        return [await command(key) for command, key in self.commands]


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def mapping_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def counter_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
async def store(mapping_redis, counter_redis, logger) -> AsyncGenerator[URLShortenerRedisStore, None]:
    """Create a store backed by the in-memory fakes."""
    store = URLShortenerRedisStore(
        mapping_client=mapping_redis,
        counter_client=counter_redis,
        logger=logger,
    )

    yield store

    await store.close()


@pytest.fixture
def counter(store, logger) -> VisitCounter:
    return VisitCounter(store, default_key="counter", logger=logger)


@pytest.fixture
def short_code_generator():
    """Create short code generator."""
    return ShortCodeGenerator(default_length=6)


@pytest.fixture
def service(store, counter, short_code_generator, logger) -> URLShortenerService:
    """Create service instance."""
    return URLShortenerService(
        store=store,
        counter=counter,
        short_code_generator=short_code_generator,
        logger=logger,
        base_url="https://sho.rt",
    )


@pytest.fixture
def config() -> Config:
    return Config(base_url="https://sho.rt")


@pytest.fixture
def app(config, store, counter, service):
    """Create test FastAPI app."""
    return create_app(config=config, store=store, counter=counter, service=service)


@pytest.fixture
async def client(app):
    """Create test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
