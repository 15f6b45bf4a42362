"""
Redis-backed cache for delivery metadata.
"""

import logging
from datetime import timedelta

from redis.asyncio import Redis
from redis.exceptions import RedisError

from app.config.settings import Settings
from app.domain.errors import CacheError

logger = logging.getLogger(__name__)


class RedisCache:
    """Write-only key/value cache with per-key expiry."""

    def __init__(self, client: Redis):
        self.client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "RedisCache":
        client = Redis.from_url(
            settings.redis_url,
            socket_timeout=settings.redis_socket_timeout_seconds,
            socket_connect_timeout=settings.redis_socket_timeout_seconds,
        )
        return cls(client)

    async def set_with_ttl(self, key: str, value: str, ttl: timedelta) -> None:
        """
        Store a value that expires after ttl.

        Raises:
            CacheError: If Redis is unreachable or rejects the write
        """
        try:
            await self.client.set(key, value, ex=ttl)
        except RedisError as e:
            raise CacheError(f"failed to cache key {key}: {e}") from e

    async def aclose(self) -> None:
        await self.client.aclose()
