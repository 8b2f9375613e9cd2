"""
cachebridge — Test Configuration and Shared Fixtures

Shared fixtures for unit and integration tests.
"""

import logging
import os
from collections.abc import Generator
from typing import Any

import pytest

from cachebridge.cache.backends.memory import MemoryCacheBackend
from cachebridge.items import CacheItemPool, ValueRepository, expiration
from cachebridge.logging_config import PACKAGE_LOGGER
from tests.helpers import Clock, RecordingStore, is_redis_available

os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "DEBUG"


@pytest.fixture
def test_redis_url() -> str:
    """Redis URL for testing (database 15 for isolation)."""
    return os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
def store() -> MemoryCacheBackend:
    """Fresh in-memory backing store."""
    return MemoryCacheBackend(max_size=100, default_ttl=3600, namespace="test")


@pytest.fixture
def repository(store: MemoryCacheBackend) -> ValueRepository:
    return ValueRepository(store)


@pytest.fixture
def pool(store: MemoryCacheBackend) -> CacheItemPool:
    return CacheItemPool(store)


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> Clock:
    """Freeze the clock items and pools read, at FROZEN_NOW."""
    frozen = Clock()
    monkeypatch.setattr(expiration, "now", frozen)
    return frozen


@pytest.fixture
def mock_env_memory(monkeypatch: pytest.MonkeyPatch) -> None:
    """Environment selecting the memory backend."""
    monkeypatch.delenv("REDIS_URL", raising=False)
    monkeypatch.setenv("CACHE_BACKEND", "memory")
    monkeypatch.setenv("CACHE_MAX_SIZE", "100")
    monkeypatch.setenv("CACHE_TTL_SECONDS", "3600")
    monkeypatch.setenv("CACHE_NAMESPACE", "test")


@pytest.fixture
def sample_cache_data() -> dict[str, Any]:
    return {
        "simple_string": "hello",
        "simple_int": 42,
        "simple_float": 3.14,
        "simple_bool": True,
        "complex_dict": {"nested": {"key": "value", "list": [1, 2, 3]}},
        "complex_list": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}],
    }


@pytest.fixture(autouse=True)
def reset_cache_factory() -> Generator[None, None, None]:
    """Reset factory and config singletons after each test to prevent state leakage."""
    yield
    from cachebridge.cache.factory import reset_cache_factory
    from cachebridge.config import loader

    reset_cache_factory()
    loader._config_instance = None


@pytest.fixture
def mock_env_redis(monkeypatch: pytest.MonkeyPatch, test_redis_url: str) -> None:
    """Environment selecting the Redis backend; skips when no server is reachable."""
    if not is_redis_available():
        pytest.skip("Redis not available")
    monkeypatch.setenv("REDIS_URL", test_redis_url)
    monkeypatch.setenv("REDIS_MAX_CONNECTIONS", "5")
    monkeypatch.setenv("REDIS_SOCKET_TIMEOUT", "2")
    monkeypatch.setenv("CACHE_NAMESPACE", "test")


@pytest.fixture(autouse=True)
def restore_package_logger() -> Generator[None, None, None]:
    """Undo handler and level changes made to the package logger by a test."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)
