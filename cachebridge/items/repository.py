"""
cachebridge — Value Repository

Process-wide registry linking live item identities to cache keys.

Several items for the same key may be alive at once. Items never share a value
object; each one resolves its value through this registry by its own identity,
so a mutation through one holder can't leak into another before it is saved.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from ..errors import InternalConsistencyError

if TYPE_CHECKING:
    from ..cache.interface import CacheInterface

logger = logging.getLogger(__name__)


class ValueRepository:
    """
    Registry of identity -> key, mediating item reads against the backing store.

    add() and remove() are synchronous and may run from garbage-collection
    finalizers on any thread, so the mapping is guarded by a re-entrant lock.
    Store calls are awaited outside the lock.
    """

    def __init__(self, store: CacheInterface):
        self._store = store
        self._registrations: dict[str, str] = {}
        self._lock = threading.RLock()

    @property
    def store(self) -> CacheInterface:
        return self._store

    def add(self, identity: str, key: str) -> None:
        """Register an item identity for key. A duplicate identity is overwritten."""
        with self._lock:
            previous = self._registrations.get(identity)
            self._registrations[identity] = key

        if previous is not None:
            logger.debug(
                "Identity re-registered, overwriting previous key",
                extra={"identity": identity, "previous_key": previous, "key": key},
            )

    def remove(self, identity: str) -> None:
        """Forget an identity. Unknown identities are ignored."""
        with self._lock:
            self._registrations.pop(identity, None)

    def key_for(self, identity: str) -> str:
        """
        Return the key registered for identity.

        Raises:
            InternalConsistencyError: identity was never registered or already removed
        """
        with self._lock:
            key = self._registrations.get(identity)

        if key is None:
            logger.error(
                "Lookup for unregistered item identity",
                extra={"identity": identity, "registered": len(self)},
            )
            raise InternalConsistencyError(identity)

        return key

    async def exists(self, identity: str) -> bool:
        """Ask the backing store whether the key behind identity exists."""
        return await self._store.exists(self.key_for(identity))

    async def get(self, identity: str) -> Any | None:
        """Fetch the stored value for the key behind identity (None on a miss)."""
        return await self._store.get(self.key_for(identity))

    def identities(self) -> list[str]:
        """Registered identities in registration order."""
        with self._lock:
            return list(self._registrations)

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._registrations

    def __len__(self) -> int:
        with self._lock:
            return len(self._registrations)
