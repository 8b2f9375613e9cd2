"""
cachebridge — Configuration Schemas

Typed configuration models using Pydantic for validation and type safety.
All configuration is sourced from environment variables and validated at load time.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Environment(str, Enum):
    """Runtime environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TEST = "test"


class CacheBackend(str, Enum):
    """Supported backing stores."""

    MEMORY = "memory"
    REDIS = "redis"


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class CacheConfig(BaseModel):
    """Backing store configuration."""

    backend: CacheBackend = Field(default=CacheBackend.MEMORY, description="Backing store to use")
    ttl_seconds: int = Field(
        default=3600,
        ge=0,
        description="Default TTL for direct store writes without a TTL (0 = no expiry)",
    )
    max_size: int = Field(default=1000, ge=1, description="Max cache entries (memory backend)")
    namespace: str = Field(default="cachebridge", min_length=1, description="Cache key namespace/prefix")

    # Redis-specific settings (only used when backend=redis)
    redis_url: str | None = Field(default=None, description="Redis connection URL")
    redis_max_connections: int = Field(default=10, ge=1, description="Redis connection pool size")
    redis_socket_timeout: int = Field(default=5, ge=1, description="Redis socket timeout in seconds")

    @model_validator(mode="after")
    def validate_redis_url(self) -> "CacheConfig":
        """Ensure redis_url is provided when backend is redis."""
        if self.backend == CacheBackend.REDIS and not self.redis_url:
            raise ValueError("redis_url is required when cache backend is 'redis'")
        return self


class BridgeConfig(BaseModel):
    """Root configuration for cachebridge."""

    environment: Environment = Field(default=Environment.DEVELOPMENT, description="Runtime environment")
    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    json_logs: bool = Field(default=False, description="Emit structured JSON log lines")

    cache: CacheConfig = Field(default_factory=CacheConfig)

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)
