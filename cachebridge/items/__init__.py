"""
cachebridge — Item Layer

Item-oriented access to a key-value store: per-key CacheItem holders, the
ValueRepository that tracks them, and the CacheItemPool that saves them.

Usage:
    from cachebridge.items import CacheItemPool

    pool = CacheItemPool(store)
    with pool.get_item("greeting") as item:
        item.set("hello").expires_after(60)
        await pool.save(item)
"""

from .expiration import AbsoluteTime, Expiry, NoExpiry, RelativeDuration
from .item import CacheItem
from .pool import CacheItemPool, validate_key
from .repository import ValueRepository

__all__ = [
    "CacheItem",
    "CacheItemPool",
    "ValueRepository",
    "validate_key",
    # Expiration variants
    "Expiry",
    "AbsoluteTime",
    "RelativeDuration",
    "NoExpiry",
]
