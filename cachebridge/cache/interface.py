"""
cachebridge — Backing Store Interface

The narrow key-value contract the item layer is built on. Backends speak raw
keys and values; items, hit tracking and deferred saves live above this line.
"""

from abc import ABC, abstractmethod
from typing import Any


class CacheInterface(ABC):
    """
    Abstract base class for backing stores.

    Misses are reported as None. A TTL of 0 means the entry never expires;
    a TTL of None falls back to the backend's default.
    """

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """
        Retrieve a value from the store.

        Args:
            key: Cache key

        Returns:
            Stored value if found and not expired, None otherwise
        """

    @abstractmethod
    async def set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
    ) -> bool:
        """
        Store a value.

        Args:
            key: Cache key
            value: Value to store
            ttl: Time-to-live in seconds (None = backend default, 0 = no expiry)

        Returns:
            True if stored successfully, False otherwise
        """

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete a key.

        Returns:
            True if the key was deleted, False if it didn't exist
        """

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return True if the key exists and is not expired."""

    @abstractmethod
    async def clear(self) -> bool:
        """Remove every entry under this store's namespace."""

    @abstractmethod
    async def get_stats(self) -> dict[str, Any]:
        """Return backend statistics (hits, misses, size, ...)."""

    @abstractmethod
    async def close(self) -> None:
        """Release backend resources. Called during graceful shutdown."""

    async def get_many(self, keys: list[str]) -> dict[str, Any]:
        """
        Retrieve multiple values.

        Default implementation calls get() for each key; missing keys are
        omitted from the result.
        """
        result = {}
        for key in keys:
            value = await self.get(key)
            if value is not None:
                result[key] = value
        return result

    async def set_many(
        self,
        items: dict[str, Any],
        ttl: int | None = None,
    ) -> int:
        """
        Store multiple values sharing one TTL.

        Returns:
            Number of items successfully stored
        """
        count = 0
        for key, value in items.items():
            if await self.set(key, value, ttl):
                count += 1
        return count

    async def delete_many(self, keys: list[str]) -> int:
        """
        Delete multiple keys.

        Returns:
            Number of keys actually deleted
        """
        count = 0
        for key in keys:
            if await self.delete(key):
                count += 1
        return count
