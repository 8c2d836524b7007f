"""Tests for API endpoints."""

import pytest


@pytest.mark.asyncio
class TestShortenEndpoint:
    """Test POST /api/v1."""

    async def test_shorten_url(self, client, sample_urls):
        response = await client.post("/api/v1", json={"url": sample_urls[0]})

        assert response.status_code == 200
        data = response.json()
        assert data["url"] == sample_urls[0]
        assert data["short"] == f"https://sho.rt/{data['short_code']}"
        assert data["expiry"] == 0
        assert "created_at" in data

    async def test_shorten_with_custom_code(self, client, sample_urls):
        response = await client.post(
            "/api/v1",
            json={"url": sample_urls[0], "short": "test123", "expiry": 24}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["short_code"] == "test123"
        assert data["short"] == "https://sho.rt/test123"
        assert data["expiry"] == 24

    async def test_shorten_accepts_custom_word(self, client, sample_urls):
        response = await client.post("/api/v1", json={"url": sample_urls[0], "customWord": "mylink"})

        assert response.status_code == 200
        assert response.json()["short_code"] == "mylink"

    async def test_shorten_empty_custom_word_generates_code(self, client, sample_urls):
        response = await client.post("/api/v1", json={"url": sample_urls[0], "customWord": ""})

        assert response.status_code == 200
        assert len(response.json()["short_code"]) == 6

    async def test_shorten_response_carries_short_url_aliases(self, client, sample_urls):
        response = await client.post("/api/v1", json={"url": sample_urls[0], "short": "alias01"})

        data = response.json()
        assert data["shortUrl"] == "https://sho.rt/alias01"
        assert data["shortenedUrl"] == "https://sho.rt/alias01"
        assert data["short"] == data["shortUrl"]

    async def test_shorten_duplicate_custom_code(self, client, sample_urls):
        await client.post("/api/v1", json={"url": sample_urls[0], "short": "dup1234"})
        response = await client.post("/api/v1", json={"url": sample_urls[1], "short": "dup1234"})

        assert response.status_code == 409
        assert response.json()["error"] == "short already in use"

    async def test_shorten_invalid_url(self, client):
        response = await client.post("/api/v1", json={"url": "not-a-url"})

        assert response.status_code == 400
        assert response.json()["error"].startswith("Invalid URL")

    async def test_shorten_own_domain(self, client):
        response = await client.post("/api/v1", json={"url": "https://sho.rt/abc123"})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid URL: cannot shorten a link to this service"}

    async def test_shorten_invalid_custom_code(self, client, sample_urls):
        response = await client.post("/api/v1", json={"url": sample_urls[0], "short": "api"})

        assert response.status_code == 400
        assert "reserved" in response.json()["error"]

    async def test_shorten_malformed_json(self, client):
        response = await client.post(
            "/api/v1",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "cannot parse JSON"

    async def test_shorten_missing_url(self, client):
        response = await client.post("/api/v1", json={"short": "abcd"})

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "cannot parse JSON"
        assert "url" in data["detail"]

    async def test_shorten_negative_expiry(self, client, sample_urls):
        response = await client.post("/api/v1", json={"url": sample_urls[0], "expiry": -1})

        assert response.status_code == 400

    async def test_shorten_expiry_too_large(self, client, sample_urls):
        response = await client.post("/api/v1", json={"url": sample_urls[0], "expiry": 10**16})

        assert response.status_code == 400
        assert response.json()["error"] == "cannot parse JSON"

    async def test_shorten_store_unavailable(self, client, sample_urls, mapping_redis):
        mapping_redis.fail = True

        response = await client.post("/api/v1", json={"url": sample_urls[0]})

        assert response.status_code == 500
        assert response.json() == {"error": "cannot connect to DB"}

    async def test_short_url_honours_forwarded_headers(self, client, sample_urls):
        response = await client.post(
            "/api/v1",
            json={"url": sample_urls[0], "short": "proxied"},
            headers={
                "X-Forwarded-Proto": "https",
                "X-Forwarded-Host": "short.ly",
                "X-Forwarded-Prefix": "/s",
            },
        )

        assert response.status_code == 200
        assert response.json()["short"] == "https://short.ly/s/proxied"


@pytest.mark.asyncio
class TestInfoEndpoints:
    """Test read-only API endpoints."""

    async def test_get_url_info(self, client, sample_urls):
        await client.post("/api/v1", json={"url": sample_urls[0], "short": "info123", "expiry": 1})

        response = await client.get("/api/v1/urls/info123")

        assert response.status_code == 200
        assert response.json() == {
            "short_code": "info123",
            "original_url": sample_urls[0],
            "short_url": "https://sho.rt/info123",
            "ttl_seconds": 3600,
        }

    async def test_get_url_info_not_found(self, client):
        response = await client.get("/api/v1/urls/nonexistent")

        assert response.status_code == 404
        assert response.json() == {"error": "short not found on database"}

    async def test_get_url_info_does_not_count(self, client, sample_urls, counter_redis):
        await client.post("/api/v1", json={"url": sample_urls[0], "short": "info123"})
        await client.get("/api/v1/urls/info123")

        assert counter_redis.data == {}

    async def test_stats(self, client):
        response = await client.get("/api/v1/stats")

        assert response.status_code == 200
        assert response.json() == {
            "visits": 0,
            "counter_key": "counter",
            "custom_codes_enabled": True,
        }

    async def test_stats_store_unavailable(self, client, counter_redis):
        counter_redis.fail = True

        response = await client.get("/api/v1/stats")

        assert response.status_code == 500
        assert response.json() == {"error": "cannot connect to DB"}

    async def test_health_check(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["mapping_store"] == "healthy"
        assert data["counter_store"] == "healthy"
        assert "timestamp" in data

    async def test_health_check_degraded(self, client, counter_redis):
        counter_redis.fail = True

        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["mapping_store"] == "healthy"
        assert data["counter_store"] == "unhealthy"


@pytest.mark.asyncio
class TestCORS:
    """Test cross-origin access from the frontend."""

    async def test_preflight_allowed_origin(self, client):
        response = await client.options(
            "/api/v1",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"

    async def test_other_origin_not_allowed(self, client):
        response = await client.get("/api/health", headers={"Origin": "http://evil.example"})

        assert "access-control-allow-origin" not in response.headers
