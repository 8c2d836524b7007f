"""Tests for the URL shortener service."""

import logging
from datetime import datetime

import pytest

from lib.service import URLShortenerService, MAX_EXPIRY_HOURS
from lib.shortcode import ShortCodeGenerator
from lib.errors import (
    InvalidURLError,
    InvalidShortCodeError,
    ShortCodeConflictError,
    ShortCodeGenerationError,
    ShortCodeNotFoundError,
    StoreUnavailableError,
    ValidationError,
)


class FixedGenerator(ShortCodeGenerator):
    """Hands out a scripted sequence of random codes."""

    def __init__(self, codes, uuid_code="fallback1"):
        super().__init__(default_length=6)
        self.codes = list(codes)
        self.uuid_code = uuid_code

    def generate_random(self, length=None):
        return self.codes.pop(0)

    def generate_from_uuid(self, length=None):
        return self.uuid_code


@pytest.mark.asyncio
class TestCreateShortURL:
    """Test URL shortening."""

    async def test_create_short_url(self, service, sample_urls, mapping_redis):
        result = await service.create_short_url(sample_urls[0])

        assert len(result["short_code"]) == 6
        assert result["original_url"] == sample_urls[0]
        assert result["expiry_hours"] == 0
        assert isinstance(result["created_at"], datetime)
        assert mapping_redis.data[result["short_code"]] == sample_urls[0]

    async def test_same_url_gets_distinct_codes(self, service, sample_urls):
        first = await service.create_short_url(sample_urls[0])
        second = await service.create_short_url(sample_urls[0])

        assert first["short_code"] != second["short_code"]

    async def test_custom_code(self, service, sample_urls):
        result = await service.create_short_url(sample_urls[1], custom_code="myrepo")

        assert result["short_code"] == "myrepo"
        assert await service.resolve("myrepo") == sample_urls[1]

    async def test_custom_code_conflict(self, service, sample_urls):
        await service.create_short_url(sample_urls[0], custom_code="taken")

        with pytest.raises(ShortCodeConflictError):
            await service.create_short_url(sample_urls[1], custom_code="taken")

        # First mapping is left alone
        assert await service.resolve("taken") == sample_urls[0]

    async def test_invalid_custom_code(self, service, sample_urls):
        with pytest.raises(InvalidShortCodeError):
            await service.create_short_url(sample_urls[0], custom_code="a!")

        with pytest.raises(InvalidShortCodeError):
            await service.create_short_url(sample_urls[0], custom_code="health")

    async def test_custom_codes_disabled(self, store, counter, sample_urls):
        service = URLShortenerService(store=store, counter=counter, enable_custom_codes=False)

        with pytest.raises(InvalidShortCodeError, match="not enabled"):
            await service.create_short_url(sample_urls[0], custom_code="mylink")

    async def test_invalid_url(self, service):
        with pytest.raises(InvalidURLError):
            await service.create_short_url("not-a-url")

        # Validation errors are also ValueErrors
        with pytest.raises(ValueError):
            await service.create_short_url("ftp://example.com/file")

    async def test_refuses_own_domain(self, service):
        with pytest.raises(InvalidURLError, match="this service"):
            await service.create_short_url("https://sho.rt/abc123")

        with pytest.raises(InvalidURLError, match="this service"):
            await service.create_short_url("http://www.sho.rt/abc123")

    async def test_same_host_other_port_is_allowed(self, store, counter):
        service = URLShortenerService(store=store, counter=counter, base_url="http://localhost:3000")

        result = await service.create_short_url("http://localhost:8080/admin")

        assert result["original_url"] == "http://localhost:8080/admin"

        with pytest.raises(InvalidURLError, match="this service"):
            await service.create_short_url("http://localhost:3000/abc123")

    async def test_expiry_sets_ttl(self, service, sample_urls, mapping_redis):
        result = await service.create_short_url(sample_urls[0], expiry_hours=24)

        assert result["expiry_hours"] == 24
        assert mapping_redis.expiry[result["short_code"]] == 24 * 3600

    async def test_default_expiry(self, store, counter, sample_urls, mapping_redis):
        service = URLShortenerService(store=store, counter=counter, default_expiry_hours=2)

        result = await service.create_short_url(sample_urls[0])

        assert result["expiry_hours"] == 2
        assert mapping_redis.expiry[result["short_code"]] == 7200

    async def test_negative_expiry(self, service, sample_urls):
        with pytest.raises(ValidationError):
            await service.create_short_url(sample_urls[0], expiry_hours=-1)

    async def test_expiry_too_large(self, service, sample_urls, mapping_redis):
        with pytest.raises(ValidationError, match="at most"):
            await service.create_short_url(sample_urls[0], expiry_hours=MAX_EXPIRY_HOURS + 1)

        assert mapping_redis.data == {}

    async def test_collision_draws_again(self, store, counter, sample_urls):
        await store.save_mapping("aaaaaa", "https://example.com/existing")
        service = URLShortenerService(
            store=store,
            counter=counter,
            short_code_generator=FixedGenerator(["aaaaaa", "bbbbbb"]),
        )

        result = await service.create_short_url(sample_urls[0])

        assert result["short_code"] == "bbbbbb"
        assert await store.get_mapping("aaaaaa") == "https://example.com/existing"

    async def test_collisions_fall_back_to_uuid_code(self, store, counter, sample_urls):
        await store.save_mapping("aaaaaa", "https://example.com/existing")
        service = URLShortenerService(
            store=store,
            counter=counter,
            short_code_generator=FixedGenerator(["aaaaaa"] * 3),
            max_collision_retries=2,
        )

        result = await service.create_short_url(sample_urls[0])

        assert result["short_code"] == "fallback1"

    async def test_generation_exhausted(self, store, counter, sample_urls):
        await store.save_mapping("aaaaaa", "https://example.com/existing")
        service = URLShortenerService(
            store=store,
            counter=counter,
            short_code_generator=FixedGenerator(["aaaaaa"] * 2, uuid_code="aaaaaa"),
            max_collision_retries=1,
        )

        with pytest.raises(ShortCodeGenerationError):
            await service.create_short_url(sample_urls[0])

    async def test_store_unavailable(self, service, sample_urls, mapping_redis):
        mapping_redis.fail = True

        with pytest.raises(StoreUnavailableError):
            await service.create_short_url(sample_urls[0])


@pytest.mark.asyncio
class TestResolve:
    """Test short code resolution and visit counting."""

    async def test_resolve(self, service, sample_urls):
        result = await service.create_short_url(sample_urls[0])

        assert await service.resolve(result["short_code"]) == sample_urls[0]

    async def test_resolve_does_not_count(self, service, sample_urls, counter_redis):
        result = await service.create_short_url(sample_urls[0])
        await service.resolve(result["short_code"])

        assert counter_redis.data == {}

    async def test_resolve_missing(self, service):
        with pytest.raises(ShortCodeNotFoundError):
            await service.resolve("nope1234")

    async def test_resolve_store_unavailable(self, service, mapping_redis):
        mapping_redis.fail = True

        with pytest.raises(StoreUnavailableError):
            await service.resolve("abc123")

    async def test_record_visit(self, service):
        assert await service.record_visit() == 1
        assert await service.record_visit() == 2

    async def test_record_visit_swallows_store_errors(self, service, counter_redis, caplog):
        counter_redis.fail = True

        with caplog.at_level(logging.WARNING):
            assert await service.record_visit() is None

        assert "Visit counter increment failed" in caplog.text


@pytest.mark.asyncio
class TestInfoAndStats:
    """Test read-only queries."""

    async def test_get_url_info(self, service, sample_urls):
        await service.create_short_url(sample_urls[0], custom_code="info1", expiry_hours=1)

        mapping = await service.get_url_info("info1")

        assert mapping.original_url == sample_urls[0]
        assert mapping.ttl_seconds == 3600

    async def test_get_url_info_missing(self, service):
        with pytest.raises(ShortCodeNotFoundError):
            await service.get_url_info("nope1234")

    async def test_statistics(self, service):
        await service.record_visit()

        assert await service.get_statistics() == {
            "visits": 1,
            "counter_key": "counter",
            "custom_codes_enabled": True,
        }

    async def test_health_check(self, service, mapping_redis):
        assert (await service.health_check())["overall"]

        mapping_redis.fail = True
        health = await service.health_check()
        assert health == {"mapping_store": False, "counter_store": True, "overall": False}
