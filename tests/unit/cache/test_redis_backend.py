"""
cachebridge — Redis Backing Store Tests

Requires a Redis server on localhost:6379 (or TEST_REDIS_URL); skipped otherwise.
"""

from collections.abc import AsyncGenerator

import pytest

from cachebridge.cache.backends.redis import RedisCacheBackend
from tests.helpers import redis_available

pytestmark = redis_available


class TestRedisCacheBackend:
    @pytest.fixture
    async def cache(self, test_redis_url: str) -> AsyncGenerator[RedisCacheBackend, None]:
        cache = RedisCacheBackend(
            redis_url=test_redis_url,
            namespace="test",
            default_ttl=3600,
            max_connections=5,
            socket_timeout=2,
        )
        await cache.clear()
        yield cache
        await cache.clear()
        await cache.close()

    def test_requires_url(self) -> None:
        with pytest.raises(ValueError, match="redis_url"):
            RedisCacheBackend(redis_url="")

    async def test_set_and_get_json_values(self, cache: RedisCacheBackend) -> None:
        assert await cache.set("user", {"name": "Ada", "tags": ["x"]}) is True
        assert await cache.get("user") == {"name": "Ada", "tags": ["x"]}

    async def test_exists_and_delete(self, cache: RedisCacheBackend) -> None:
        await cache.set("key1", "value1", ttl=0)
        assert await cache.exists("key1") is True

        assert await cache.delete("key1") is True
        assert await cache.exists("key1") is False
        assert await cache.delete("key1") is False

    async def test_unserializable_value_is_rejected(self, cache: RedisCacheBackend) -> None:
        assert await cache.set("key1", object()) is False
        assert await cache.exists("key1") is False

    async def test_batch_operations(self, cache: RedisCacheBackend) -> None:
        assert await cache.set_many({"a": 1, "b": 2, "c": 3}, ttl=60) == 3
        assert await cache.get_many(["a", "c", "missing"]) == {"a": 1, "c": 3}
        assert await cache.delete_many(["a", "b"]) == 2

    async def test_clear_is_namespaced(self, cache: RedisCacheBackend, test_redis_url: str) -> None:
        other = RedisCacheBackend(redis_url=test_redis_url, namespace="other")
        try:
            await other.set("k", "keep", ttl=60)
            await cache.set("k", "drop", ttl=60)

            assert await cache.clear() is True

            assert await cache.exists("k") is False
            assert await other.get("k") == "keep"
        finally:
            await other.clear()
            await other.close()

    async def test_stats(self, cache: RedisCacheBackend) -> None:
        await cache.set("k", 1)
        await cache.get("k")
        await cache.get("missing")

        stats = await cache.get_stats()
        assert stats["backend"] == "redis"
        assert stats["connected"] is True
        assert stats["hits"] == 1
        assert stats["misses"] == 1
