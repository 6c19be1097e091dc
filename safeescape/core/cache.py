"""
@file cache.py
@brief Redis cache manager singleton
@details
Async Redis wrapper used to cache geo provider lookups. Redis is optional:
every failure is logged and treated as a cache miss, so planning keeps
working without it.

@author SafeEscape Project
@date 2025-12-18
"""

import json
import logging
from typing import Any, Optional

import redis.asyncio as redis

logger = logging.getLogger(__name__)


class RedisCache:
    """
    @brief Singleton wrapper for Async Redis client
    """
    _instance: Optional['RedisCache'] = None
    client: Optional[redis.Redis] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(RedisCache, cls).__new__(cls)
        return cls._instance

    async def connect(self, redis_url: str):
        """
        @brief Initialize Redis connection pool
        """
        try:
            self.client = redis.from_url(
                redis_url,
                encoding="utf-8",
                decode_responses=True
            )
            await self.client.ping()
            logger.info(f"Connected to Redis at {redis_url}")
        except Exception as e:
            logger.error(f"Failed to connect to Redis: {e}")
            self.client = None

    async def close(self):
        if self.client:
            await self.client.close()
            self.client = None
            logger.info("Redis connection closed")

    async def get(self, key: str) -> Optional[Any]:
        """
        @brief Retrieve a JSON value, None on miss or error
        """
        if not self.client:
            return None
        try:
            value = await self.client.get(key)
            if value:
                return json.loads(value)
            return None
        except Exception as e:
            logger.warning(f"Redis get error for {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: int = 300):
        """
        @brief Store a JSON-serializable value with TTL (seconds)
        """
        if not self.client:
            return
        try:
            await self.client.setex(key, ttl, json.dumps(value))
        except Exception as e:
            logger.warning(f"Redis set error for {key}: {e}")


def places_key(lat: float, lng: float, radius: int, category: str) -> str:
    # ~11 m grid so nearby requests share entries
    return f"places:{lat:.4f}:{lng:.4f}:{radius}:{category}"


# Global instance
cache = RedisCache()
