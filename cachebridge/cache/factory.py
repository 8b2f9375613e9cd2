"""
cachebridge — Store and Pool Factory

Canonical factory for backing stores and the item pools built on them.

Key points:
- Named instances: asking twice for the same name returns the same object
- Backend selected by CACHE_BACKEND=memory|redis (redis auto-selected when REDIS_URL is set)
- The redis client is imported lazily, only when the redis backend is chosen
- One CacheItemPool per store name, sharing that store's ValueRepository
- Falling back to the global config also applies its LOG_LEVEL / JSON_LOGS settings

Examples:
    from cachebridge.cache.factory import create_cache, create_pool

    store = create_cache()
    pool = create_pool()

    from cachebridge.config import CacheBackend, CacheConfig
    cfg = CacheConfig(backend=CacheBackend.MEMORY, max_size=100)
    test_pool = create_pool(cfg, name="test")
"""

from __future__ import annotations

import logging

from ..config import CacheBackend, CacheConfig, get_config
from ..errors import CacheConnectionError, ConfigurationError
from ..items.pool import CacheItemPool
from ..logging_config import configure_logging
from .backends.memory import MemoryCacheBackend
from .interface import CacheInterface

logger = logging.getLogger(__name__)

_cache_instances: dict[str, CacheInterface] = {}
_pool_instances: dict[str, CacheItemPool] = {}


def _create_memory_cache(config: CacheConfig) -> CacheInterface:
    return MemoryCacheBackend(
        max_size=config.max_size,
        default_ttl=config.ttl_seconds,
        namespace=config.namespace,
    )


def _create_redis_cache(config: CacheConfig) -> CacheInterface:
    """Construct a redis backend, importing the client only now."""
    try:
        from .backends.redis import RedisCacheBackend
    except ImportError as e:
        logger.error(
            "Redis backend selected but redis client is not installed",
            extra={"package": "redis>=5.0.0", "error": str(e)},
        )
        raise ConfigurationError(
            "Redis backend selected but redis client is unavailable. Install with: pip install 'cachebridge[redis]'",
            details={"package": "redis>=5.0.0", "error": str(e), "backend": "redis"},
        ) from e

    try:
        return RedisCacheBackend(
            redis_url=config.redis_url or "",
            namespace=config.namespace,
            default_ttl=config.ttl_seconds,
            max_connections=config.redis_max_connections,
            socket_timeout=config.redis_socket_timeout,
        )
    except ValueError as e:
        logger.error(
            "Failed to build redis client: %s",
            e,
            extra={"backend": "redis", "error": str(e)},
        )
        raise CacheConnectionError("redis", details={"error": str(e)}) from e


def create_cache(
    config: CacheConfig | None = None,
    name: str = "default",
) -> CacheInterface:
    """
    Create (or return the existing) backing store called name.

    Args:
        config: Cache configuration (uses global config, and its logging settings, if not provided)
        name: Instance name

    Returns:
        Configured backing store

    Raises:
        ConfigurationError: If configuration is invalid or the backend client is not installed
        CacheConnectionError: If the backend client rejects its connection settings
    """
    if name in _cache_instances:
        logger.debug("Returning existing cache instance: %s", name)
        return _cache_instances[name]

    if config is None:
        settings = get_config()
        configure_logging(settings.log_level, json_format=settings.json_logs)
        config = settings.cache

    backend = CacheBackend(config.backend)
    logger.info(
        "Creating cache instance '%s' with backend: %s",
        name,
        backend.value,
        extra={"cache_name": name, "backend": backend.value},
    )

    if backend == CacheBackend.MEMORY:
        cache = _create_memory_cache(config)
    elif backend == CacheBackend.REDIS:
        cache = _create_redis_cache(config)
    else:  # pragma: no cover - CacheBackend is exhaustive
        raise ConfigurationError(
            f"Unknown cache backend: {backend}",
            details={"backend": str(backend), "supported": [b.value for b in CacheBackend]},
        )

    _cache_instances[name] = cache
    return cache


def get_cache(name: str = "default") -> CacheInterface:
    """Get a backing store by name, creating it from the global config if needed."""
    if name not in _cache_instances:
        logger.debug("Cache instance '%s' not found, creating new instance", name)
        return create_cache(name=name)

    return _cache_instances[name]


def create_pool(
    config: CacheConfig | None = None,
    name: str = "default",
) -> CacheItemPool:
    """
    Create (or return the existing) item pool over the store called name.

    The store is created through create_cache() when it doesn't exist yet.
    """
    if name in _pool_instances:
        return _pool_instances[name]

    pool = CacheItemPool(create_cache(config, name=name))
    _pool_instances[name] = pool
    logger.debug("Created item pool for cache instance '%s'", name, extra={"cache_name": name})
    return pool


async def close_all_caches() -> None:
    """
    Commit every pool's deferred items, then close every store.

    Must be called during graceful shutdown; deferred items that were never
    committed are otherwise lost.
    """
    for name, pool in list(_pool_instances.items()):
        try:
            await pool.close()
        except Exception as e:
            logger.error(
                "Error committing item pool '%s': %s",
                name,
                e,
                extra={"cache_name": name, "error": str(e)},
                exc_info=True,
            )
    _pool_instances.clear()

    if not _cache_instances:
        logger.debug("No cache instances to close")
        return

    logger.info("Closing %d cache instance(s)...", len(_cache_instances))

    for name, cache in list(_cache_instances.items()):
        try:
            await cache.close()
        except Exception as e:
            logger.error(
                "Error closing cache instance '%s': %s",
                name,
                e,
                extra={"cache_name": name, "error": str(e)},
                exc_info=True,
            )

    _cache_instances.clear()


def reset_cache_factory() -> None:
    """
    Forget all store and pool instances without closing them.

    Only meant for tests; use close_all_caches() for a proper shutdown.
    """
    count = len(_cache_instances)
    _cache_instances.clear()
    _pool_instances.clear()
    logger.debug("Reset cache factory, cleared %d instance reference(s)", count)


def list_cache_instances() -> list[str]:
    return list(_cache_instances.keys())
