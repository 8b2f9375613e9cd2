"""
cachebridge — Logging Setup and Error Type Tests
"""

import json
import logging

from cachebridge.errors import (
    CacheBridgeError,
    CacheConnectionError,
    ErrorCode,
    InternalConsistencyError,
    InvalidArgumentError,
    InvalidKeyError,
)
from cachebridge.logging_config import PACKAGE_LOGGER, JSONFormatter, configure_logging


class TestLogging:
    def test_configure_plain(self) -> None:
        logger = configure_logging("debug")

        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert not isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_configure_twice_does_not_duplicate_handlers(self) -> None:
        configure_logging("INFO", json_format=True)
        logger = configure_logging("INFO", json_format=True)

        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, JSONFormatter)

    def test_json_formatter_includes_extra_fields(self) -> None:
        record = logging.LogRecord(
            name="cachebridge.items.pool",
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg="Committed %d item(s)",
            args=(3,),
            exc_info=None,
        )
        record.stored = 3

        payload = json.loads(JSONFormatter().format(record))

        assert payload["message"] == "Committed 3 item(s)"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "cachebridge.items.pool"
        assert payload["stored"] == 3
        assert "args" not in payload

class TestErrors:
    def test_to_dict(self) -> None:
        error = CacheBridgeError("boom", {"key": "x"})

        assert error.to_dict() == {
            "error": "CacheBridgeError",
            "message": "boom",
            "details": {"key": "x", "error_code": ErrorCode.CACHE_FAILURE.value},
        }

    def test_invalid_argument_is_type_error(self) -> None:
        error = InvalidArgumentError("bad")

        assert isinstance(error, TypeError)
        assert isinstance(error, CacheBridgeError)
        assert error.details["error_code"] == "INVALID_ARGUMENT"

    def test_invalid_key_error(self) -> None:
        error = InvalidKeyError("a:b", "contains reserved characters ':'")

        assert isinstance(error, InvalidArgumentError)
        assert error.key == "a:b"
        assert "a:b" in str(error)
        assert error.details["error_code"] == "INVALID_KEY"

    def test_internal_consistency_error(self) -> None:
        error = InternalConsistencyError("abc123")

        assert "abc123" in str(error)
        assert error.details["identity"] == "abc123"

    def test_connection_error_message(self) -> None:
        assert str(CacheConnectionError("redis")) == "Failed to connect to cache backend: redis"
