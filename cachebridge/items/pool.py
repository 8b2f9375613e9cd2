"""
cachebridge — Cache Item Pool

Hands out CacheItem objects for keys and writes them back to a backing store,
either immediately (save) or batched later (save_deferred + commit).

Usage:
    pool = CacheItemPool(MemoryCacheBackend())

    item = pool.get_item("user.42")
    if not await item.is_hit():
        item.set(load_user(42)).expires_after(3600)
        await pool.save(item)
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from types import TracebackType
from typing import TYPE_CHECKING, Any

from ..errors import InvalidArgumentError, InvalidKeyError
from . import expiration
from .item import CacheItem
from .repository import ValueRepository

if TYPE_CHECKING:
    from ..cache.interface import CacheInterface

logger = logging.getLogger(__name__)

RESERVED_KEY_CHARACTERS = frozenset("{}()/\\@:")


def validate_key(key: Any) -> str:
    """
    Check that key is usable as a cache key.

    Raises:
        InvalidKeyError: key is not a non-empty string or has reserved characters
    """
    if not isinstance(key, str):
        raise InvalidKeyError(key, f"must be a string, {type(key).__name__} given")
    if not key:
        raise InvalidKeyError(key, "must not be empty")

    reserved = sorted(RESERVED_KEY_CHARACTERS.intersection(key))
    if reserved:
        raise InvalidKeyError(key, f"contains reserved characters {''.join(reserved)!r}")

    return key


def _store_ttl(item: CacheItem) -> int | None:
    """TTL to hand the store for item, or None when the item is already due."""
    expire = item.get_expiration()
    if expire == expiration.NEVER:
        return 0

    ttl = expiration.ttl_for(expire)
    return ttl if ttl > 0 else None


class CacheItemPool:
    """
    Item-oriented front for a CacheInterface store.

    Deferred items are kept as private snapshots (see CacheItem.copy), so a
    caller can keep mutating or drop its own item without affecting what will
    be committed. Until commit(), reads through this pool see deferred values
    as hits even though the store has not been written yet.
    """

    def __init__(self, store: CacheInterface):
        self._store = store
        self._repository = ValueRepository(store)
        self._deferred: dict[str, CacheItem] = {}

    @property
    def store(self) -> CacheInterface:
        return self._store

    @property
    def repository(self) -> ValueRepository:
        return self._repository

    @property
    def deferred_count(self) -> int:
        return len(self._deferred)

    def _live_deferred(self, key: str) -> CacheItem | None:
        """Deferred snapshot for key, discarding it if it has expired meanwhile."""
        snapshot = self._deferred.get(key)
        if snapshot is None:
            return None

        if snapshot.is_expired():
            del self._deferred[key]
            snapshot.close()
            return None

        return snapshot

    def _discard_deferred(self, key: str) -> None:
        snapshot = self._deferred.pop(key, None)
        if snapshot is not None:
            snapshot.close()

    def _release_deferred(self, pending: dict[str, CacheItem], keys: Iterable[str]) -> None:
        """Drop written keys from the queue unless a newer snapshot replaced them meanwhile."""
        for key in keys:
            snapshot = pending[key]
            if self._deferred.get(key) is snapshot:
                del self._deferred[key]
            snapshot.close()

    @staticmethod
    def _assert_item(item: Any, operation: str) -> CacheItem:
        if not isinstance(item, CacheItem):
            type_name = type(item).__name__
            raise InvalidArgumentError(
                f"{operation}() expects a CacheItem, {type_name} given",
                details={"operation": operation, "type": type_name},
            )
        return item

    # ------------ Reads ------------

    def get_item(self, key: str) -> CacheItem:
        """Return a new item for key, pre-marked as a hit when a deferred save is pending."""
        validate_key(key)

        snapshot = self._live_deferred(key)
        if snapshot is not None:
            item = snapshot.copy()
            item.override_is_hit(True)
            return item

        return CacheItem(key, self._repository)

    def get_items(self, keys: Iterable[str]) -> dict[str, CacheItem]:
        """Return items for keys, in request order. Duplicate keys share one item."""
        items: dict[str, CacheItem] = {}
        for key in keys:
            if key not in items:
                items[key] = self.get_item(key)
        return items

    async def has_item(self, key: str) -> bool:
        validate_key(key)

        if self._live_deferred(key) is not None:
            return True

        return await self._store.exists(key)

    # ------------ Writes ------------

    async def save(self, item: CacheItem) -> bool:
        """
        Persist item to the store now.

        Any deferred save for the same key is superseded. Items that were never
        written are not sent to the store; already expired items delete the key.
        """
        self._assert_item(item, "save")
        key = item.get_key()
        self._discard_deferred(key)

        if not item.has_changed():
            return True

        ttl = _store_ttl(item)
        if ttl is None:
            await self._store.delete(key)
            return True

        value = await item.get()
        stored = await self._store.set(key, value, ttl=ttl)

        if not stored:
            logger.warning("Store rejected item save", extra={"key": key, "ttl": ttl})

        return stored

    def save_deferred(self, item: CacheItem) -> bool:
        """
        Queue item for the next commit().

        The queued snapshot deep-copies the item's local value, so values that
        cannot be copied (locks, sockets) are rejected with InvalidArgumentError.
        """
        self._assert_item(item, "save_deferred")

        if not item.has_changed():
            return True

        key = item.get_key()
        self._discard_deferred(key)
        self._deferred[key] = item.copy()

        logger.debug("Deferred item save", extra={"key": key, "deferred": len(self._deferred)})
        return True

    async def commit(self) -> bool:
        """
        Write every deferred item to the store.

        Items sharing a TTL are written with one set_many() call. An entry leaves
        the queue only once its batch has been written, so items whose write
        raised stay queued for the next commit(). Returns True only if every
        item was stored.
        """
        if not self._deferred:
            return True

        pending = dict(self._deferred)
        expired: list[str] = []
        batches: dict[int, dict[str, Any]] = defaultdict(dict)

        for key, snapshot in pending.items():
            ttl = _store_ttl(snapshot)
            if ttl is None:
                expired.append(key)
                continue
            batches[ttl][key] = await snapshot.get()

        if expired:
            await self._store.delete_many(expired)
            self._release_deferred(pending, expired)

        stored = 0
        for ttl, values in batches.items():
            stored += await self._store.set_many(values, ttl=ttl)
            self._release_deferred(pending, values)

        expected = len(pending) - len(expired)
        logger.info(
            "Committed %d of %d deferred item(s)",
            stored,
            expected,
            extra={"stored": stored, "expected": expected, "expired": len(expired)},
        )
        return stored == expected

    async def delete_item(self, key: str) -> bool:
        """Remove key from the deferred queue and the store. A missing key is not a failure."""
        validate_key(key)
        self._discard_deferred(key)
        await self._store.delete(key)
        return True

    async def delete_items(self, keys: Iterable[str]) -> bool:
        valid_keys = [validate_key(key) for key in keys]
        for key in valid_keys:
            self._discard_deferred(key)
        await self._store.delete_many(valid_keys)
        return True

    async def clear(self) -> bool:
        """Drop pending deferred items and empty the store."""
        for snapshot in self._deferred.values():
            snapshot.close()
        self._deferred.clear()
        return await self._store.clear()

    # ------------ Lifecycle ------------

    async def close(self) -> None:
        """Commit whatever is still deferred. The store itself is left open."""
        if self._deferred:
            logger.info("Committing %d deferred item(s) on close", len(self._deferred))
        await self.commit()

    async def __aenter__(self) -> CacheItemPool:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
