"""Tests for the Redis cache layer and Redis normalization cache."""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import redis.asyncio as redis

from app.storage import cache
from app.storage import normalization_cache
from app.storage.normalization_cache import RedisNormalizationCache
from core.features import NormalizationCache

KEY = "binance:BTCUSDT:1m"


class TestRedisNormalizationCache:
    """Tests for normalization_cache (key layout and miss semantics)."""

    def test_satisfies_protocol(self):
        assert isinstance(RedisNormalizationCache(ttl=0), NormalizationCache)

    @pytest.mark.asyncio
    async def test_get_mean_hit(self):
        with patch.object(normalization_cache.cache, 'is_cache_available', return_value=True):
            with patch.object(normalization_cache.cache, 'get_json', new_callable=AsyncMock, return_value=101.5) as mock_get:
                value = await RedisNormalizationCache(ttl=0).get_mean(KEY)

                assert value == 101.5
                mock_get.assert_called_once_with("norm:mean:binance:BTCUSDT:1m")

    @pytest.mark.asyncio
    async def test_get_std_dev_key(self):
        with patch.object(normalization_cache.cache, 'is_cache_available', return_value=True):
            with patch.object(normalization_cache.cache, 'get_json', new_callable=AsyncMock, return_value=3) as mock_get:
                value = await RedisNormalizationCache(ttl=0).get_std_dev(KEY)

                assert value == 3.0
                assert isinstance(value, float)
                mock_get.assert_called_once_with("norm:std:binance:BTCUSDT:1m")

    @pytest.mark.asyncio
    async def test_get_cache_unavailable(self):
        with patch.object(normalization_cache.cache, 'is_cache_available', return_value=False):
            assert await RedisNormalizationCache(ttl=0).get_mean(KEY) is None

    @pytest.mark.asyncio
    async def test_get_missing(self):
        with patch.object(normalization_cache.cache, 'is_cache_available', return_value=True):
            with patch.object(normalization_cache.cache, 'get_json', new_callable=AsyncMock, return_value=None):
                assert await RedisNormalizationCache(ttl=0).get_mean(KEY) is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", ["abc", {"v": 1}, True])
    async def test_get_non_numeric_is_miss(self, payload):
        with patch.object(normalization_cache.cache, 'is_cache_available', return_value=True):
            with patch.object(normalization_cache.cache, 'get_json', new_callable=AsyncMock, return_value=payload):
                assert await RedisNormalizationCache(ttl=0).get_mean(KEY) is None

    @pytest.mark.asyncio
    async def test_set_mean_with_ttl(self):
        with patch.object(normalization_cache.cache, 'is_cache_available', return_value=True):
            with patch.object(normalization_cache.cache, 'set_json', new_callable=AsyncMock, return_value=True) as mock_set:
                await RedisNormalizationCache(ttl=600).set_mean(KEY, 100.0)
                mock_set.assert_called_once_with("norm:mean:binance:BTCUSDT:1m", 100.0, 600)

    @pytest.mark.asyncio
    async def test_set_std_dev_without_ttl(self):
        with patch.object(normalization_cache.cache, 'is_cache_available', return_value=True):
            with patch.object(normalization_cache.cache, 'set_json', new_callable=AsyncMock, return_value=True) as mock_set:
                await RedisNormalizationCache(ttl=0).set_std_dev(KEY, 2.0)
                mock_set.assert_called_once_with("norm:std:binance:BTCUSDT:1m", 2.0, None)

    @pytest.mark.asyncio
    async def test_set_skips_nan(self):
        with patch.object(normalization_cache.cache, 'is_cache_available', return_value=True):
            with patch.object(normalization_cache.cache, 'set_json', new_callable=AsyncMock) as mock_set:
                await RedisNormalizationCache(ttl=0).set_mean(KEY, float("nan"))
                mock_set.assert_not_called()

    @pytest.mark.asyncio
    async def test_clear(self):
        with patch.object(normalization_cache.cache, 'delete_pattern', new_callable=AsyncMock, return_value=4) as mock_del:
            assert await RedisNormalizationCache(ttl=0).clear() == 4
            mock_del.assert_called_once_with("norm:*")


class TestCacheModule:
    """Tests for the Redis helpers degrading to misses."""

    @pytest.fixture
    def client(self):
        mock_client = MagicMock()
        with patch.object(cache, '_client', mock_client):
            yield mock_client

    @pytest.mark.asyncio
    async def test_get_without_client(self):
        with patch.object(cache, '_client', None):
            assert await cache.get("k") is None
            assert await cache.set("k", b"v") is False
            assert cache.is_cache_available() is False

    @pytest.mark.asyncio
    async def test_get_redis_error_is_miss(self, client):
        client.get = AsyncMock(side_effect=redis.RedisError("boom"))
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_set_redis_error_returns_false(self, client):
        client.set = AsyncMock(side_effect=redis.ConnectionError("refused"))
        assert await cache.set("k", b"v") is False

    @pytest.mark.asyncio
    async def test_set_with_ttl_uses_setex(self, client):
        client.setex = AsyncMock()
        assert await cache.set("k", b"v", ttl=30) is True
        client.setex.assert_awaited_once_with("k", 30, b"v")

    @pytest.mark.asyncio
    async def test_json_round_trip(self, client):
        store = {}

        async def fake_set(key, value):
            store[key] = value

        async def fake_get(key):
            return store.get(key)

        client.set = AsyncMock(side_effect=fake_set)
        client.get = AsyncMock(side_effect=fake_get)

        assert await cache.set_json("norm:mean:x", 101.25) is True
        assert await cache.get_json("norm:mean:x") == 101.25

    @pytest.mark.asyncio
    async def test_get_json_decode_error(self, client):
        client.get = AsyncMock(return_value=b"{not json")
        assert await cache.get_json("k") is None

    @pytest.mark.asyncio
    async def test_init_cache_disables_on_connection_error(self):
        mock_client = MagicMock()
        mock_client.ping = AsyncMock(side_effect=redis.ConnectionError("refused"))

        with patch.object(cache, '_client', None), patch.object(cache, '_pool', None):
            with patch.object(cache.ConnectionPool, 'from_url', return_value=MagicMock()):
                with patch.object(cache.redis, 'Redis', return_value=mock_client):
                    await cache.init_cache()
                    assert cache.is_cache_available() is False

    @pytest.mark.asyncio
    async def test_close_cache_releases_connection(self):
        mock_client = MagicMock()
        mock_client.aclose = AsyncMock()
        mock_pool = MagicMock()
        mock_pool.disconnect = AsyncMock()

        with patch.object(cache, '_client', mock_client), patch.object(cache, '_pool', mock_pool):
            await cache.close_cache()

            mock_client.aclose.assert_awaited_once()
            mock_pool.disconnect.assert_awaited_once()
            assert cache.is_cache_available() is False
            assert await RedisNormalizationCache(ttl=0).get_mean(KEY) is None
