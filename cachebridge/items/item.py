"""
cachebridge — Cache Item

One key's cache slot as seen by one call site: existing or about to be created.
"""

from __future__ import annotations

import uuid
import weakref
from copy import deepcopy
from datetime import datetime, timedelta
from types import TracebackType
from typing import Any

from ..errors import InvalidArgumentError
from . import expiration
from .repository import ValueRepository

# Marks "no local write yet"; None is a legitimate value to set()
_UNSET: Any = object()


class CacheItem:
    """
    Value holder for a single key.

    The item registers itself with the repository under a fresh identity when
    created and unregisters when disposed: through close(), by leaving a
    `with` block, or when it is garbage collected. Local writes stay on the
    item until a pool saves it.
    """

    def __init__(self, key: str, repository: ValueRepository):
        self._key = key
        self._repository = repository
        self._value: Any = _UNSET
        self._expire = expiration.NEVER
        self._is_hit: bool | None = None
        self._changed = False

        self._identity = uuid.uuid4().hex
        repository.add(self._identity, key)
        # Holds the repository, not self, so collection can still happen
        self._finalizer = weakref.finalize(self, repository.remove, self._identity)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(key={self._key!r}, changed={self._changed}, expiration={self._expire})"

    @property
    def key(self) -> str:
        return self._key

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def get_key(self) -> str:
        return self._key

    async def get(self) -> Any:
        """
        Resolve the item's value.

        A local write always wins. Otherwise a miss yields None and a hit is
        fetched from the backing store.
        """
        if self._value is not _UNSET:
            return self._value

        if not await self.is_hit():
            return None

        return await self._repository.get(self._identity)

    def set(self, value: Any) -> CacheItem:
        self._value = value
        self._changed = True
        return self

    async def is_hit(self) -> bool:
        if self._is_hit is not None:
            return self._is_hit

        return await self._repository.exists(self._identity)

    def expires_at(self, when: datetime | None) -> CacheItem:
        """Expire at an absolute datetime; None means never."""
        self._expire = expiration.resolve(expiration.absolute(when))
        self._changed = True
        return self

    def expires_after(self, time: int | timedelta | None) -> CacheItem:
        """Expire a number of seconds (or a timedelta) from now; None means never."""
        self._expire = expiration.resolve(expiration.relative(time))
        self._changed = True
        return self

    def get_expiration(self) -> int:
        """Absolute expiration in epoch seconds, 0 when the item never expires."""
        return self._expire

    def is_expired(self) -> bool:
        return self._expire != expiration.NEVER and self._expire < expiration.now()

    def has_changed(self) -> bool:
        """True once the value or the expiration has been written."""
        return self._changed

    def override_is_hit(self, is_hit: bool) -> None:
        """
        Force is_hit() to report is_hit without asking the store.

        Used for values served from a pool's deferred queue, which the store
        does not know about yet.
        """
        self._is_hit = is_hit

    def copy(self) -> CacheItem:
        """
        Return an independently registered item carrying this item's local state.

        The local value is deep-copied so neither item can mutate the other's.

        Raises:
            InvalidArgumentError: the local value cannot be deep-copied
        """
        value = self._value
        if value is not _UNSET:
            try:
                value = deepcopy(value)
            except TypeError as e:
                type_name = type(value).__name__
                raise InvalidArgumentError(
                    f"Cannot copy a cached value of type {type_name}: {e}",
                    details={"key": self._key, "type": type_name},
                ) from e

        clone = CacheItem(self._key, self._repository)
        clone._value = value
        clone._expire = self._expire
        clone._is_hit = self._is_hit
        clone._changed = self._changed
        return clone

    def close(self) -> None:
        """Unregister from the repository. Safe to call any number of times."""
        self._finalizer()

    def __enter__(self) -> CacheItem:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
