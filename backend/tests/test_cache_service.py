"""
Tests: CacheService keys and its degrade-to-miss behaviour.

Run with:
    pytest backend/tests/test_cache_service.py -v
"""

import asyncio
import json

import pytest

from app.services.cache_service import TTL_PACKAGES, CacheService


class FakeRedis:
    def __init__(self):
        self.data = {}
        self.ttls = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.ttls[key] = ex


@pytest.fixture
def cache(monkeypatch):
    service = CacheService()
    fake = FakeRedis()

    async def _get_redis():
        return fake

    monkeypatch.setattr(service, "_get_redis", _get_redis)
    return service, fake


class TestKeys:
    def test_recommendation_key_ignores_param_order(self):
        service = CacheService()
        a = service.recommendation_key({"event_type": "wedding", "attendee_count": 100})
        b = service.recommendation_key({"attendee_count": 100, "event_type": "wedding"})
        assert a == b
        assert a.startswith("budget:recommendations:")

    def test_packages_key(self):
        service = CacheService()
        assert service.packages_key("wedding", "New York") == "budget:packages:wedding:new york"
        assert service.packages_key("party", None) == "budget:packages:party:*"


class TestRoundTrip:
    def test_packages(self, cache):
        service, fake = cache
        asyncio.run(service.set_packages("wedding", None, [{"id": "wedding-essentials"}]))
        key = service.packages_key("wedding", None)
        assert json.loads(fake.data[key]) == [{"id": "wedding-essentials"}]
        assert fake.ttls[key] == TTL_PACKAGES
        assert asyncio.run(service.get_packages("wedding", None)) == [{"id": "wedding-essentials"}]

    def test_miss(self, cache):
        service, _ = cache
        assert asyncio.run(service.get_recommendations({"event_type": "party"})) is None


class TestRedisDown:
    def test_get_and_set_degrade(self, monkeypatch):
        service = CacheService()

        async def _no_redis():
            return None

        monkeypatch.setattr(service, "_get_redis", _no_redis)
        assert asyncio.run(service.get("budget:x")) is None
        assert asyncio.run(service.set("budget:x", {"a": 1})) is False

    def test_errors_become_misses(self, monkeypatch):
        service = CacheService()

        class BrokenRedis:
            async def get(self, key):
                raise ConnectionError("reset by peer")

            async def set(self, key, value, ex=None):
                raise ConnectionError("reset by peer")

        async def _broken():
            return BrokenRedis()

        monkeypatch.setattr(service, "_get_redis", _broken)
        assert asyncio.run(service.get("budget:x")) is None
        assert asyncio.run(service.set("budget:x", 1)) is False
