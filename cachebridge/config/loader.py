"""
cachebridge — Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for the process.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import BridgeConfig

logger = logging.getLogger(__name__)

_config_instance: BridgeConfig | None = None


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes")


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> BridgeConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated BridgeConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    if env_path.exists():
        logger.info("Loading environment from %s", env_path)
        try:
            load_dotenv(env_path, override=True)
        except Exception as e:
            logger.error(
                "Failed to load .env file from %s: %s",
                env_path,
                e,
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    # Redis is selected automatically when REDIS_URL is present
    redis_url = os.getenv("REDIS_URL")
    cache_backend = "redis" if redis_url else "memory"

    try:
        config_dict = {
            "environment": os.getenv("ENVIRONMENT", "development"),
            "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
            "json_logs": _env_bool("JSON_LOGS", "false"),
            "cache": {
                "backend": os.getenv("CACHE_BACKEND", cache_backend),
                "ttl_seconds": int(os.getenv("CACHE_TTL_SECONDS", "3600")),
                "max_size": int(os.getenv("CACHE_MAX_SIZE", "1000")),
                "namespace": os.getenv("CACHE_NAMESPACE", "cachebridge"),
                "redis_url": redis_url,
                "redis_max_connections": int(os.getenv("REDIS_MAX_CONNECTIONS", "10")),
                "redis_socket_timeout": int(os.getenv("REDIS_SOCKET_TIMEOUT", "5")),
            },
        }
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid numeric configuration value: {e}",
            details={"error": str(e)},
        ) from e

    try:
        _config_instance = BridgeConfig(**config_dict)  # type: ignore[arg-type]
    except ValidationError as e:
        logger.error(
            "Configuration validation failed: %s",
            e,
            extra={"validation_errors": e.errors()},
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables.",
            details={"validation_errors": e.errors()},
        ) from e

    logger.info(
        "Configuration loaded (environment: %s)",
        _config_instance.environment,
        extra={"environment": _config_instance.environment, "cache_backend": _config_instance.cache.backend},
    )
    return _config_instance


def get_config() -> BridgeConfig:
    """Get the current configuration, loading it on first access."""
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> BridgeConfig:
    """Force reload configuration."""
    return load_config(env_file=env_file, reload=True)
