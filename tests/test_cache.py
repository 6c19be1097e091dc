"""
Test Redis Cache Module
"""
from unittest.mock import AsyncMock, patch

import pytest

from safeescape.core.cache import RedisCache, places_key


@pytest.fixture
def fresh_cache():
    # Reset singleton, restore the application's instance afterwards
    original = RedisCache._instance
    RedisCache._instance = None
    yield RedisCache()
    RedisCache._instance = original


@pytest.fixture
def mock_redis():
    with patch("redis.asyncio.from_url") as mock:
        yield mock


@pytest.mark.asyncio
async def test_redis_connection(mock_redis, fresh_cache):
    mock_client = AsyncMock()
    mock_redis.return_value = mock_client

    await fresh_cache.connect("redis://cache:6379/0")

    mock_redis.assert_called_once()
    assert mock_redis.call_args.args[0] == "redis://cache:6379/0"
    mock_client.ping.assert_awaited_once()
    assert fresh_cache.client == mock_client

    await fresh_cache.close()
    mock_client.close.assert_awaited_once()
    assert fresh_cache.client is None


@pytest.mark.asyncio
async def test_failed_connection_leaves_cache_disabled(mock_redis, fresh_cache):
    mock_client = AsyncMock()
    mock_client.ping.side_effect = ConnectionError("refused")
    mock_redis.return_value = mock_client

    await fresh_cache.connect("redis://nowhere:6379/0")

    assert fresh_cache.client is None
    assert await fresh_cache.get("anything") is None


@pytest.mark.asyncio
async def test_redis_get_set(fresh_cache):
    fresh_cache.client = AsyncMock()

    # Test Set
    await fresh_cache.set("test_key", {"foo": "bar"}, ttl=60)
    fresh_cache.client.setex.assert_awaited_once_with("test_key", 60, '{"foo": "bar"}')

    # Test Get
    fresh_cache.client.get.return_value = '{"foo": "bar"}'
    assert await fresh_cache.get("test_key") == {"foo": "bar"}

    # Test Miss
    fresh_cache.client.get.return_value = None
    assert await fresh_cache.get("missing") is None


@pytest.mark.asyncio
async def test_redis_errors_are_misses(fresh_cache):
    fresh_cache.client = AsyncMock()
    fresh_cache.client.get.side_effect = TimeoutError("slow")
    fresh_cache.client.setex.side_effect = TimeoutError("slow")

    assert await fresh_cache.get("k") is None
    await fresh_cache.set("k", [1, 2])


def test_places_key_rounds_coordinates():
    assert places_key(19.07601, 72.87769, 15000, "school") == "places:19.0760:72.8777:15000:school"
    assert places_key(19.07601, 72.87769, 15000, "school") == places_key(19.07604, 72.87771, 15000, "school")
