"""
cachebridge — Item-oriented cache bridge

Exposes a plain key-value store through per-key CacheItem holders that are
read, mutated and explicitly saved (immediately or deferred) through a
CacheItemPool.
"""

from .cache import CacheInterface, close_all_caches, create_cache, create_pool, get_cache
from .errors import (
    CacheBridgeError,
    CacheError,
    ConfigurationError,
    InternalConsistencyError,
    InvalidArgumentError,
    InvalidKeyError,
)
from .items import CacheItem, CacheItemPool, ValueRepository
from .logging_config import configure_logging

__version__ = "0.1.0"

__all__ = [
    "CacheInterface",
    "CacheItem",
    "CacheItemPool",
    "ValueRepository",
    "create_cache",
    "create_pool",
    "get_cache",
    "close_all_caches",
    "configure_logging",
    # Errors
    "CacheBridgeError",
    "CacheError",
    "ConfigurationError",
    "InternalConsistencyError",
    "InvalidArgumentError",
    "InvalidKeyError",
]
