"""Redis cache service for budget recommendations and catalog lookups."""

import hashlib
import json
import logging
from typing import Any

import redis.asyncio as redis

from app.config import settings

logger = logging.getLogger(__name__)

# TTLs in seconds
TTL_RECOMMENDATIONS = settings.budget_cache_ttl_seconds
TTL_PACKAGES = 60 * 60  # 1 hour


class CacheService:
    """Redis-backed cache with typed TTLs. Every operation degrades to a miss when Redis is down."""

    def __init__(self):
        self._redis: redis.Redis | None = None

    async def _get_redis(self) -> redis.Redis | None:
        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    settings.redis_url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._redis.ping()
            except Exception as e:
                logger.warning(f"Redis unavailable, cache disabled: {e}")
                self._redis = None
                return None
        return self._redis

    async def get(self, key: str) -> Any | None:
        """Get a value from cache. Returns None on miss or error."""
        try:
            r = await self._get_redis()
            if r is None:
                return None
            raw = await r.get(key)
            if raw is None:
                return None
            return json.loads(raw)
        except Exception:
            return None

    async def set(self, key: str, value: Any, ttl: int = TTL_RECOMMENDATIONS) -> bool:
        """Set a value in cache with TTL. Returns False on error."""
        try:
            r = await self._get_redis()
            if r is None:
                return False
            await r.set(key, json.dumps(value, default=str), ex=ttl)
            return True
        except Exception:
            return False

    # Typed helpers

    def recommendation_key(self, params: dict) -> str:
        digest = hashlib.sha1(json.dumps(params, sort_keys=True, default=str).encode()).hexdigest()
        return f"budget:recommendations:{digest}"

    def packages_key(self, event_type: str, city: str | None) -> str:
        return f"budget:packages:{event_type}:{(city or '*').lower()}"

    async def get_recommendations(self, params: dict) -> dict | None:
        return await self.get(self.recommendation_key(params))

    async def set_recommendations(self, params: dict, data: dict):
        await self.set(self.recommendation_key(params), data, TTL_RECOMMENDATIONS)

    async def get_packages(self, event_type: str, city: str | None) -> list[dict] | None:
        return await self.get(self.packages_key(event_type, city))

    async def set_packages(self, event_type: str, city: str | None, data: list[dict]):
        await self.set(self.packages_key(event_type, city), data, TTL_PACKAGES)

    async def close(self):
        if self._redis:
            await self._redis.aclose()
            self._redis = None


cache_service = CacheService()
