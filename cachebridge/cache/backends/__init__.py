"""
cachebridge — Backing Store Implementations

Redis backend is lazy-loaded via factory.py so the redis client stays optional.
"""

from .memory import MemoryCacheBackend

__all__ = [
    "MemoryCacheBackend",
]
