"""
cachebridge — Core Error Types

Defines the exception hierarchy for the cache bridge.
All exceptions inherit from CacheBridgeError for consistent error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Standard error codes carried in exception details."""

    INVALID_ARGUMENT = "INVALID_ARGUMENT"
    INVALID_KEY = "INVALID_KEY"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    CACHE_FAILURE = "CACHE_FAILURE"
    CACHE_UNAVAILABLE = "CACHE_UNAVAILABLE"
    INTERNAL_CONSISTENCY = "INTERNAL_CONSISTENCY"


class CacheBridgeError(Exception):
    """Base exception for all cachebridge errors."""

    error_code: ErrorCode = ErrorCode.CACHE_FAILURE

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.details.setdefault("error_code", self.error_code.value)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging and diagnostics."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(CacheBridgeError):
    """Raised when configuration is invalid or missing."""

    error_code = ErrorCode.CONFIGURATION_ERROR


class CacheError(CacheBridgeError):
    """Base exception for cache-related errors."""


class CacheConnectionError(CacheError):
    """Raised when a backing store client cannot be built for its connection settings."""

    error_code = ErrorCode.CACHE_UNAVAILABLE

    def __init__(self, backend: str, details: dict[str, Any] | None = None):
        message = f"Failed to connect to cache backend: {backend}"
        super().__init__(message, details)


class InternalConsistencyError(CacheError):
    """
    Raised when the value repository is asked about an identity it never
    registered. This is a lifecycle bug upstream, never a normal miss.
    """

    error_code = ErrorCode.INTERNAL_CONSISTENCY

    def __init__(self, identity: str, details: dict[str, Any] | None = None):
        message = f"Item identity is not registered with the value repository: {identity}"
        error_details = details or {}
        error_details["identity"] = identity
        super().__init__(message, error_details)
        self.identity = identity


class InvalidArgumentError(CacheBridgeError, TypeError):
    """
    Raised when a caller passes an argument of an unsupported shape:
    expiration inputs, cache keys, or non-item objects handed to the pool.
    """

    error_code = ErrorCode.INVALID_ARGUMENT


class InvalidKeyError(InvalidArgumentError):
    """Raised when a cache key is empty, not a string, or has reserved characters."""

    error_code = ErrorCode.INVALID_KEY

    def __init__(self, key: Any, reason: str):
        message = f"Invalid cache key {key!r}: {reason}"
        super().__init__(message, {"key": repr(key), "reason": reason})
        self.key = key
