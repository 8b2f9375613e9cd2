"""
cachebridge — Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config
from .schemas import (
    BridgeConfig,
    CacheBackend,
    CacheConfig,
    Environment,
    LogLevel,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    # Main config
    "BridgeConfig",
    # Enums
    "Environment",
    "CacheBackend",
    "LogLevel",
    # Config sections
    "CacheConfig",
]
