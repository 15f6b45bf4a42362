"""
Tests for the Redis cache wrapper with a mocked Redis client.
"""

from datetime import timedelta
from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.domain.errors import CacheError
from app.infrastructure.redis_cache import RedisCache


class TestSetWithTTL:

    @pytest.mark.asyncio
    async def test_sets_value_with_expiry(self):
        client = AsyncMock()
        cache = RedisCache(client)

        await cache.set_with_ttl("msg-a", '{"deliveryId": "w1"}', timedelta(hours=24))

        client.set.assert_awaited_once_with("msg-a", '{"deliveryId": "w1"}', ex=timedelta(hours=24))

    @pytest.mark.asyncio
    async def test_redis_error_becomes_cache_error(self):
        client = AsyncMock()
        client.set.side_effect = RedisConnectionError("Connection refused")
        cache = RedisCache(client)

        with pytest.raises(CacheError):
            await cache.set_with_ttl("msg-a", "{}", timedelta(hours=24))

    @pytest.mark.asyncio
    async def test_aclose_closes_client(self):
        client = AsyncMock()
        cache = RedisCache(client)

        await cache.aclose()

        client.aclose.assert_awaited_once()
