"""Async Redis client wrapper."""
from __future__ import annotations
import json
from typing import Any, Optional
from redis.asyncio import Redis, from_url
from redis.asyncio.client import Pipeline
from redis.asyncio.lock import Lock

from holdem_bets.config import config
from holdem_bets.utils.logger import get_logger

logger = get_logger(__name__)


class RedisClient:
    """Async Redis client wrapper with JSON serialization."""

    _instance: Optional["RedisClient"] = None
    _redis: Optional[Redis] = None

    def __new__(cls) -> "RedisClient":
        """Singleton pattern for Redis client."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    async def connect(self, url: Optional[str] = None) -> None:
        """Connect to Redis."""
        if self._redis is None:
            url = url or config.redis_url
            self._redis = await from_url(
                url,
                encoding="utf-8",
                decode_responses=True
            )
            logger.info(f"Connected to Redis at {url}")

    async def disconnect(self) -> None:
        """Disconnect from Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Disconnected from Redis")

    @property
    def redis(self) -> Redis:
        """Get Redis connection, raise if not connected."""
        if self._redis is None:
            raise RuntimeError("Redis not connected. Call connect() first.")
        return self._redis

    # Basic operations
    async def get(self, key: str) -> Optional[str]:
        """Get a string value."""
        return await self.redis.get(key)

    async def mget(self, keys: list[str]) -> list[Optional[str]]:
        """Get several string values at once."""
        if not keys:
            return []
        return await self.redis.mget(keys)

    async def incr(self, key: str) -> int:
        """Increment a counter and return the new value."""
        return await self.redis.incr(key)

    # JSON operations
    async def get_json(self, key: str) -> Optional[Any]:
        """Get and deserialize JSON value."""
        value = await self.get(key)
        if value is None:
            return None
        return json.loads(value)

    async def mget_json(self, keys: list[str]) -> list[Optional[Any]]:
        """Get and deserialize several JSON values."""
        values = await self.mget(keys)
        return [json.loads(v) if v is not None else None for v in values]

    # Set operations
    async def smembers(self, key: str) -> set[str]:
        """Get all members of a set."""
        return await self.redis.smembers(key)

    # List operations
    async def lrange(self, key: str, start: int, stop: int) -> list[str]:
        """Get a range of list elements."""
        return await self.redis.lrange(key, start, stop)

    async def lindex(self, key: str, index: int) -> Optional[str]:
        """Get a list element by index."""
        return await self.redis.lindex(key, index)

    # Transactions and locks
    def pipeline(self) -> Pipeline:
        """Start a MULTI/EXEC pipeline."""
        return self.redis.pipeline(transaction=True)

    def lock(self, name: str, timeout: Optional[float] = None) -> Lock:
        """Create a distributed lock."""
        return self.redis.lock(name, timeout=timeout)


# Global instance
redis_client = RedisClient()
