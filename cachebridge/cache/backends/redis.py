"""
cachebridge — Redis Backing Store

Asynchronous Redis store with:
- JSON serialization for values
- Per-key TTL support (0 = never expires)
- Namespace prefixing so several pools can share one database
- Batched MGET / pipelined SET / chunked DEL

Requires: redis>=5.0 with asyncio support

Example:
    store = RedisCacheBackend(redis_url="redis://localhost:6379/0", namespace="sessions")
    await store.set("user:42", {"name": "Ada"}, ttl=60)
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ..interface import CacheInterface

logger = logging.getLogger(__name__)

try:
    from redis.asyncio import Redis
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Redis async client is required but not installed. Install with: pip install 'cachebridge[redis]'"
    ) from e

_DELETE_CHUNK = 1000


class RedisCacheBackend(CacheInterface):
    """
    Redis backing store with JSON values and TTL.

    Notes:
    - Keys are prefixed with "<namespace>:".
    - Values are stored as compact UTF-8 JSON.
    - TTL is applied with EX seconds (None -> default_ttl, 0 -> no expiry).
    - Failures are logged and reported as a miss / False, never raised.
    """

    def __init__(
        self,
        redis_url: str,
        namespace: str = "cachebridge",
        default_ttl: int = 3600,
        max_connections: int = 10,
        socket_timeout: int = 5,
    ) -> None:
        if not redis_url:
            raise ValueError("redis_url is required")

        self.namespace = namespace.strip() or "cachebridge"
        self.default_ttl = max(0, int(default_ttl))
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0

        # Lazy connection; connects on first command
        self._client = Redis.from_url(  # type: ignore[call-overload]
            url=redis_url,
            decode_responses=True,
            max_connections=max_connections,
            socket_timeout=socket_timeout,
        )

    # ------------ Helpers ------------

    def _make_key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    @staticmethod
    def _to_json(value: Any) -> str:
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))

    @staticmethod
    def _from_json(data: str | bytes | None) -> Any | None:
        """Deserialize stored JSON. Non-JSON payloads are returned as-is."""
        if data is None:
            return None
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        try:
            return json.loads(data)
        except ValueError as e:
            logger.warning(
                "Failed to decode JSON from cache, returning raw data: %s",
                e,
                extra={"data_preview": data[:100], "error": str(e)},
            )
            return data

    def _ttl_seconds(self, ttl: int | None) -> int | None:
        """None -> default_ttl; zero or negative -> no expiry (None for redis)."""
        if ttl is None:
            ttl = self.default_ttl
        ttl = int(ttl)
        return ttl if ttl > 0 else None

    # ------------ Core Interface ------------

    async def get(self, key: str) -> Any | None:
        try:
            data = await self._client.get(self._make_key(key))
        except Exception as e:
            logger.error(
                "Failed to get key '%s' from Redis: %s",
                key,
                e,
                extra={"key": key, "namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            self._misses += 1
            return None

        if data is None:
            self._misses += 1
            return None

        self._hits += 1
        return self._from_json(data)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        try:
            payload = self._to_json(value)
        except (TypeError, ValueError) as e:
            logger.error(
                "Failed to serialize value for key '%s': %s",
                key,
                e,
                extra={"key": key, "value_type": type(value).__name__, "error": str(e)},
            )
            return False

        try:
            res = await self._client.set(name=self._make_key(key), value=payload, ex=self._ttl_seconds(ttl))
        except Exception as e:
            logger.error(
                "Failed to set key '%s' in Redis: %s",
                key,
                e,
                extra={"key": key, "namespace": self.namespace, "ttl": ttl, "error": str(e)},
                exc_info=True,
            )
            return False

        success = bool(res)
        if success:
            self._sets += 1
        return success

    async def delete(self, key: str) -> bool:
        try:
            deleted = await self._client.delete(self._make_key(key))
        except Exception as e:
            logger.error(
                "Failed to delete key '%s' from Redis: %s",
                key,
                e,
                extra={"key": key, "namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            return False

        if deleted:
            self._deletes += 1
        return bool(deleted)

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._client.exists(self._make_key(key)))
        except Exception as e:
            logger.error(
                "Failed to check existence of key '%s' in Redis: %s",
                key,
                e,
                extra={"key": key, "namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            return False

    async def clear(self) -> bool:
        """Delete every key under the namespace using SCAN + DEL batches."""
        pattern = f"{self.namespace}:*"
        cursor = 0
        total_deleted = 0

        try:
            while True:
                cursor, keys = await self._client.scan(cursor=cursor, match=pattern, count=_DELETE_CHUNK)
                if keys:
                    total_deleted += await self._client.delete(*keys)
                if cursor == 0:
                    break
        except Exception as e:
            logger.error(
                "Failed to clear cache for namespace '%s': %s",
                self.namespace,
                e,
                extra={"namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            return False

        self._deletes += total_deleted
        logger.info(
            "Cleared %d keys from namespace '%s'",
            total_deleted,
            self.namespace,
            extra={"namespace": self.namespace, "cleared": total_deleted},
        )
        return True

    async def get_stats(self) -> dict[str, Any]:
        total_requests = self._hits + self._misses
        stats: dict[str, Any] = {
            "backend": "redis",
            "namespace": self.namespace,
            "default_ttl": self.default_ttl,
            "hits": self._hits,
            "misses": self._misses,
            "hit_rate": round((self._hits / total_requests) * 100, 2) if total_requests else 0.0,
            "sets": self._sets,
            "deletes": self._deletes,
            "connected": False,
        }

        try:
            stats["connected"] = bool(await self._client.ping())
            info = await self._client.info(section="server")
            stats["redis_version"] = info.get("redis_version")
        except Exception as e:
            logger.warning("Failed to get Redis INFO (restricted or unavailable): %s", e, extra={"error": str(e)})

        return stats

    async def close(self) -> None:
        try:
            await self._client.aclose()
            logger.info("Closed Redis cache backend for namespace '%s'", self.namespace)
        except Exception as e:
            logger.error(
                "Error closing Redis client: %s",
                e,
                extra={"namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )

    # ------------ Batch operations ------------

    async def get_many(self, keys: list[str]) -> dict[str, Any]:
        """Retrieve multiple values in one MGET round-trip. Missing keys are omitted."""
        if not keys:
            return {}

        try:
            values = await self._client.mget([self._make_key(k) for k in keys])
        except Exception as e:
            logger.error(
                "Failed to get multiple keys from Redis: %s",
                e,
                extra={"key_count": len(keys), "namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )
            return {}

        result: dict[str, Any] = {}
        for key, raw in zip(keys, values, strict=True):
            if raw is None:
                self._misses += 1
                continue
            self._hits += 1
            result[key] = self._from_json(raw)

        return result

    async def set_many(self, items: dict[str, Any], ttl: int | None = None) -> int:
        """Store multiple values through one pipeline, all with the same TTL."""
        if not items:
            return 0

        ex = self._ttl_seconds(ttl)
        try:
            pipe = self._client.pipeline(transaction=False)
            for key, value in items.items():
                pipe.set(self._make_key(key), self._to_json(value), ex=ex)
            results = await pipe.execute()
        except Exception as e:
            logger.error(
                "Failed to set multiple keys in Redis: %s",
                e,
                extra={"key_count": len(items), "namespace": self.namespace, "ttl": ttl, "error": str(e)},
                exc_info=True,
            )
            return 0

        success_count = sum(1 for r in results if r in (True, "OK", b"OK"))
        self._sets += success_count
        return success_count

    async def delete_many(self, keys: list[str]) -> int:
        """Delete multiple keys with chunked variadic DEL calls."""
        if not keys:
            return 0

        ns_keys = [self._make_key(k) for k in keys]
        deleted_total = 0

        try:
            for i in range(0, len(ns_keys), _DELETE_CHUNK):
                deleted_total += int(await self._client.delete(*ns_keys[i : i + _DELETE_CHUNK]))
        except Exception as e:
            logger.error(
                "Failed to delete multiple keys from Redis: %s",
                e,
                extra={"key_count": len(keys), "namespace": self.namespace, "error": str(e)},
                exc_info=True,
            )

        self._deletes += deleted_total
        return deleted_total
