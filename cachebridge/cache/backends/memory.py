"""
cachebridge — Memory Backing Store

In-process store with LRU eviction and per-key TTL.
Suitable for single-process deployments and tests.
"""

import asyncio
import logging
import time
from collections import OrderedDict
from typing import Any

from ..interface import CacheInterface

logger = logging.getLogger(__name__)


class MemoryCacheBackend(CacheInterface):
    """
    In-memory backing store with LRU eviction.

    Features:
    - LRU eviction when max_size is reached
    - Per-key TTL support (0 = never expires)
    - asyncio.Lock around every mutation
    """

    def __init__(
        self,
        max_size: int = 1000,
        default_ttl: int = 3600,
        namespace: str = "cachebridge",
    ):
        """
        Initialize memory backend.

        Args:
            max_size: Maximum number of entries (LRU eviction when exceeded)
            default_ttl: TTL in seconds used when set() gets ttl=None (0 = no expiry)
            namespace: Cache key namespace/prefix
        """
        self.max_size = max_size
        self.default_ttl = default_ttl
        self.namespace = namespace

        # namespaced key -> (value, expiry_time or None)
        self._cache: OrderedDict[str, tuple[Any, float | None]] = OrderedDict()

        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._deletes = 0
        self._evictions = 0

        self._lock = asyncio.Lock()

    def _make_key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def _expiry_for(self, ttl: int | None) -> float | None:
        if ttl is None:
            ttl = self.default_ttl
        return time.time() + ttl if ttl > 0 else None

    def _live_entry(self, cache_key: str) -> tuple[Any, float | None] | None:
        """Return the entry for cache_key, dropping it if expired. Caller holds the lock."""
        entry = self._cache.get(cache_key)
        if entry is None:
            return None

        expiry = entry[1]
        if expiry is not None and time.time() > expiry:
            del self._cache[cache_key]
            return None

        return entry

    def _store(self, cache_key: str, value: Any, expiry: float | None) -> None:
        """Insert or replace an entry, evicting the LRU entry when full. Caller holds the lock."""
        if cache_key not in self._cache and len(self._cache) >= self.max_size:
            evicted_key, _ = self._cache.popitem(last=False)
            self._evictions += 1
            logger.debug("Evicted key from memory cache: %s", evicted_key)

        self._cache[cache_key] = (value, expiry)
        self._cache.move_to_end(cache_key)
        self._sets += 1

    async def get(self, key: str) -> Any | None:
        """Retrieve value from cache."""
        if not key:
            logger.warning("Attempted to get cache value with empty key")
            return None

        async with self._lock:
            cache_key = self._make_key(key)
            entry = self._live_entry(cache_key)

            if entry is None:
                self._misses += 1
                return None

            self._cache.move_to_end(cache_key)
            self._hits += 1
            return entry[0]

    async def set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
    ) -> bool:
        """Store value in cache."""
        if not key:
            logger.warning("Attempted to set cache value with empty key")
            return False

        async with self._lock:
            self._store(self._make_key(key), value, self._expiry_for(ttl))
            return True

    async def delete(self, key: str) -> bool:
        """Delete key from cache."""
        if not key:
            logger.warning("Attempted to delete cache value with empty key")
            return False

        async with self._lock:
            cache_key = self._make_key(key)

            if cache_key in self._cache:
                del self._cache[cache_key]
                self._deletes += 1
                return True

            return False

    async def exists(self, key: str) -> bool:
        """Check if key exists and is not expired."""
        if not key:
            return False

        async with self._lock:
            return self._live_entry(self._make_key(key)) is not None

    async def clear(self) -> bool:
        """Clear all entries from cache."""
        async with self._lock:
            size = len(self._cache)
            self._cache.clear()
            logger.info(
                "Cleared %d entries from memory cache namespace '%s'",
                size,
                self.namespace,
                extra={"namespace": self.namespace, "cleared": size},
            )
            return True

    async def get_stats(self) -> dict[str, Any]:
        """Get cache statistics."""
        async with self._lock:
            total_requests = self._hits + self._misses
            hit_rate = (self._hits / total_requests * 100) if total_requests > 0 else 0.0

            return {
                "backend": "memory",
                "size": len(self._cache),
                "max_size": self.max_size,
                "hits": self._hits,
                "misses": self._misses,
                "hit_rate": round(hit_rate, 2),
                "sets": self._sets,
                "deletes": self._deletes,
                "evictions": self._evictions,
                "namespace": self.namespace,
            }

    async def close(self) -> None:
        """Nothing to release; data lives in-process."""
        logger.debug("Memory cache backend closed for namespace '%s'", self.namespace)

    async def get_many(self, keys: list[str]) -> dict[str, Any]:
        """Retrieve multiple values under a single lock acquisition."""
        if not keys:
            return {}

        async with self._lock:
            result = {}

            for key in keys:
                if not key:
                    continue

                cache_key = self._make_key(key)
                entry = self._live_entry(cache_key)

                if entry is None:
                    self._misses += 1
                    continue

                result[key] = entry[0]
                self._cache.move_to_end(cache_key)
                self._hits += 1

            return result

    async def set_many(
        self,
        items: dict[str, Any],
        ttl: int | None = None,
    ) -> int:
        """Store multiple values sharing one TTL."""
        if not items:
            return 0

        async with self._lock:
            expiry = self._expiry_for(ttl)
            count = 0

            for key, value in items.items():
                if not key:
                    continue

                self._store(self._make_key(key), value, expiry)
                count += 1

            return count

    async def delete_many(self, keys: list[str]) -> int:
        """Delete multiple keys under a single lock acquisition."""
        if not keys:
            return 0

        async with self._lock:
            count = 0

            for key in keys:
                cache_key = self._make_key(key) if key else None

                if cache_key is not None and cache_key in self._cache:
                    del self._cache[cache_key]
                    self._deletes += 1
                    count += 1

            return count
