"""Test doubles shared across the suite."""

import socket
from typing import Any

import pytest

from cachebridge.cache.backends.memory import MemoryCacheBackend

FROZEN_NOW = 1_700_000_000


def is_redis_available() -> bool:
    """Check if a Redis server is listening on localhost:6379."""
    try:
        with socket.create_connection(("localhost", 6379), timeout=1):
            return True
    except OSError:
        return False


redis_available = pytest.mark.skipif(not is_redis_available(), reason="Redis server not available")


class Clock:
    """Controllable replacement for expiration.now()."""

    def __init__(self, start: int = FROZEN_NOW):
        self.current = start

    def __call__(self) -> int:
        return self.current

    def advance(self, seconds: int) -> None:
        self.current += seconds


class RecordingStore(MemoryCacheBackend):
    """Memory store that records the writes and existence checks it receives."""

    def __init__(self) -> None:
        super().__init__(max_size=100, default_ttl=3600, namespace="recording")
        self.set_calls: list[tuple[str, Any, int | None]] = []
        self.set_many_calls: list[tuple[dict[str, Any], int | None]] = []
        self.exists_calls: list[str] = []

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        self.set_calls.append((key, value, ttl))
        return await super().set(key, value, ttl)

    async def set_many(self, items: dict[str, Any], ttl: int | None = None) -> int:
        self.set_many_calls.append((dict(items), ttl))
        return await super().set_many(items, ttl)

    async def exists(self, key: str) -> bool:
        self.exists_calls.append(key)
        return await super().exists(key)


class FlakyStore(MemoryCacheBackend):
    """Memory store whose batch writes raise while fail_writes is set."""

    def __init__(self) -> None:
        super().__init__(max_size=100, default_ttl=3600, namespace="flaky")
        self.fail_writes = False

    async def set_many(self, items: dict[str, Any], ttl: int | None = None) -> int:
        if self.fail_writes:
            raise ConnectionError("store unreachable")
        return await super().set_many(items, ttl)
