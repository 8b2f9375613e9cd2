"""
cachebridge — Backing Store Module

- interface.py: the key-value contract every backend implements
- backends/: memory (always available) and redis (optional extra)
- factory.py: named store and item-pool instances

Usage:
    from cachebridge.cache import create_pool

    pool = create_pool()
    item = pool.get_item("greeting")
"""

from .factory import (
    close_all_caches,
    create_cache,
    create_pool,
    get_cache,
    list_cache_instances,
    reset_cache_factory,
)
from .interface import CacheInterface

__all__ = [
    "create_cache",
    "create_pool",
    "get_cache",
    "close_all_caches",
    "list_cache_instances",
    "reset_cache_factory",
    "CacheInterface",
]
