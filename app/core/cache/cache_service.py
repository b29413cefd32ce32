"""
Async Redis Cache Service

Best-effort read cache for catalog queries. Every operation degrades to a
no-op (miss on read, False on write) when Redis is disabled or unreachable;
failures are logged as warnings and never reach the caller.
"""

import asyncio
import json
import logging
from typing import Any

import redis.asyncio as aioredis

from app.config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class CacheKeys:
    """Key prefixes shared by readers and invalidators."""

    PRODUCTS = "products"
    CATEGORIES = "categories"
    ANALYTICS = "analytics"

    @staticmethod
    def build(prefix: str, *parts: Any) -> str:
        return ":".join([prefix, *[str(p) for p in parts]])


class CacheService:
    """
    JSON cache on top of redis.asyncio.

    Usage:
        cache = CacheService(settings)
        await cache.connect()

        await cache.set("categories:tree", tree, ttl=600)
        tree = await cache.get("categories:tree")
        await cache.delete_pattern("categories:*")
    """

    def __init__(self, settings: Settings | None = None, client: aioredis.Redis | None = None):
        self.settings = settings or get_settings()
        self._redis_client: aioredis.Redis | None = client
        self._is_dummy = not self.settings.CACHE_ENABLED

    @property
    def is_available(self) -> bool:
        return self._redis_client is not None and not self._is_dummy

    async def connect(self, max_retries: int = 3, retry_delay: float = 1.0) -> None:
        """Open the Redis connection with retries; fall back to no-op mode."""
        if not self.settings.CACHE_ENABLED:
            logger.info("Cache disabled (CACHE_ENABLED=False)")
            self._is_dummy = True
            return

        retries = 0
        last_error: Exception | None = None

        while retries < max_retries:
            try:
                self._redis_client = aioredis.Redis(
                    host=self.settings.REDIS_HOST,
                    port=self.settings.REDIS_PORT,
                    db=self.settings.REDIS_DB,
                    password=self.settings.REDIS_PASSWORD,
                    decode_responses=True,
                    socket_timeout=5.0,
                    socket_connect_timeout=5.0,
                )
                await self._redis_client.ping()
                logger.info(f"Redis cache connected: {self.settings.REDIS_HOST}:{self.settings.REDIS_PORT}")
                self._is_dummy = False
                return
            except (aioredis.ConnectionError, aioredis.TimeoutError) as e:
                retries += 1
                last_error = e
                logger.warning(f"Redis connection attempt {retries}/{max_retries} failed: {e}")
                if retries < max_retries:
                    await asyncio.sleep(retry_delay)

        logger.warning(f"Redis unavailable after {max_retries} attempts, caching disabled: {last_error}")
        self._redis_client = None
        self._is_dummy = True

    async def close(self) -> None:
        if self._redis_client is not None:
            await self._redis_client.aclose()
            self._redis_client = None

    async def get(self, key: str) -> Any | None:
        if not self.is_available:
            return None
        try:
            data = await self._redis_client.get(key)  # type: ignore[union-attr]
            if data is None:
                return None
            return json.loads(data)
        except (aioredis.RedisError, ValueError) as e:
            logger.warning(f"Cache get failed for {key}: {e}")
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        if not self.is_available:
            return False
        try:
            payload = json.dumps(value, default=str)
            await self._redis_client.set(key, payload, ex=ttl or self.settings.CACHE_DEFAULT_TTL)  # type: ignore[union-attr]
            return True
        except (aioredis.RedisError, TypeError) as e:
            logger.warning(f"Cache set failed for {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        if not self.is_available:
            return False
        try:
            await self._redis_client.delete(key)  # type: ignore[union-attr]
            return True
        except aioredis.RedisError as e:
            logger.warning(f"Cache delete failed for {key}: {e}")
            return False

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern; returns the number removed."""
        if not self.is_available:
            return 0
        try:
            removed = 0
            async for key in self._redis_client.scan_iter(match=pattern, count=200):  # type: ignore[union-attr]
                removed += await self._redis_client.delete(key)  # type: ignore[union-attr]
            if removed:
                logger.debug(f"Cache invalidated {removed} keys for {pattern}")
            return removed
        except aioredis.RedisError as e:
            logger.warning(f"Cache pattern delete failed for {pattern}: {e}")
            return 0

    async def ping(self) -> bool:
        if not self.is_available:
            return False
        try:
            return bool(await self._redis_client.ping())  # type: ignore[union-attr]
        except aioredis.RedisError:
            return False
