"""
Redis access for the settings cache and the admin token revocation list.

Redis is optional infrastructure: every call degrades to a cache miss (and
logs why) when the server is unreachable or ``CACHE_ENABLED`` is off.
"""
import json
from typing import Any, Optional
from redis import asyncio as aioredis
from redis.exceptions import RedisError
from weddinghub.core.config import settings
from weddinghub.core.logging import logger


class RedisCache:
    def __init__(self, url: str, enabled: bool = True):
        self.url = url
        self.enabled = enabled
        self._client: Optional[aioredis.Redis] = None

    def _get_client(self) -> aioredis.Redis:
        # Created on first use so importing the app never touches the network
        if self._client is None:
            self._client = aioredis.from_url(
                self.url,
                decode_responses=True,
                max_connections=20,
                socket_connect_timeout=2,
            )
            logger.info("Redis client created")
        return self._client

    async def get(self, key: str) -> Optional[Any]:
        """Return the JSON-decoded value stored under ``key``, or None."""
        if not self.enabled:
            return None
        try:
            raw = await self._get_client().get(key)
        except (RedisError, OSError) as e:
            logger.error(f"Redis GET failed for {key}: {e}")
            return None
        return json.loads(raw) if raw else None

    async def set(self, key: str, value: Any, expire: int = 300) -> bool:
        """
        Store ``value`` as JSON for ``expire`` seconds.

        Returns:
            True if Redis accepted the write
        """
        if not self.enabled:
            return False
        try:
            await self._get_client().setex(key, expire, json.dumps(value, default=str))
        except (RedisError, OSError) as e:
            logger.error(f"Redis SET failed for {key}: {e}")
            return False
        return True

    async def delete_pattern(self, pattern: str) -> int:
        """Remove every key matching a glob ``pattern``; returns how many went."""
        if not self.enabled:
            return 0
        try:
            client = self._get_client()
            keys = [key async for key in client.scan_iter(match=pattern)]
            return await client.delete(*keys) if keys else 0
        except (RedisError, OSError) as e:
            logger.error(f"Redis pattern delete failed for {pattern}: {e}")
            return 0

    async def exists(self, key: str) -> bool:
        if not self.enabled:
            return False
        try:
            return await self._get_client().exists(key) > 0
        except (RedisError, OSError) as e:
            logger.error(f"Redis EXISTS failed for {key}: {e}")
            return False

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            logger.info("Redis client closed")


cache = RedisCache(settings.REDIS_URL, enabled=settings.CACHE_ENABLED)
