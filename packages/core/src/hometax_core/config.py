"""Configuration and logging setup for the Hometax filing core.

This module provides Pydantic Settings-based configuration with environment
variable support and sensible defaults, plus the structlog setup used by the
rest of the package.

Usage:
    from hometax_core.config import HometaxSettings, configure_logging

    # Load from environment variables and .env file
    settings = HometaxSettings()
    configure_logging(settings)

    if settings.record_audit_trail:
        print("Audit entries will be attached to results")
"""

import logging
import sys
from functools import lru_cache
from typing import Optional

import structlog
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


class HometaxSettings(BaseSettings):
    """Root configuration for the filing core.

    Environment Variables:
        HOMETAX_ENV: Environment name (development, staging, production, test)
        HOMETAX_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)
        HOMETAX_LOG_FORMAT: Log renderer (console, json)
        HOMETAX_RECORD_AUDIT_TRAIL: Attach per-step audit entries to results
    """

    model_config = SettingsConfigDict(
        env_prefix="HOMETAX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_format: str = Field(
        default="console",
        description="Log renderer, 'console' or 'json'",
    )
    record_audit_trail: bool = Field(
        default=True,
        description="Attach per-step audit entries to filing results",
    )

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v_lower = v.lower().strip()
        if v_lower not in {"console", "json"}:
            raise ValueError(f"Invalid log format: {v}. Must be 'console' or 'json'")
        return v_lower

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"


def load_settings(**overrides) -> HometaxSettings:
    """Build settings from the environment, raising ConfigurationError on bad values."""
    try:
        return HometaxSettings(**overrides)
    except ValidationError as e:
        first = e.errors()[0]
        key = ".".join(str(part) for part in first.get("loc", ()))
        raise ConfigurationError(
            f"Invalid Hometax configuration: {first.get('msg')}",
            config_key=key or None,
            actual=first.get("input"),
            details={"error_count": e.error_count()},
        ) from e


@lru_cache
def get_settings() -> HometaxSettings:
    """Environment settings, read once per process.

    A failed load is not cached; call ``get_settings.cache_clear()`` after
    changing the environment.
    """
    return load_settings()


def configure_logging(settings: Optional[HometaxSettings] = None) -> None:
    """Configure structlog for the filing core.

    Events are filtered by ``log_level`` and rendered (console or JSON) by
    structlog's print logger straight to stdout; stdlib ``logging`` handlers
    are not involved.
    """
    settings = settings or get_settings()
    level = getattr(logging, settings.log_level)

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


__all__ = [
    "HometaxSettings",
    "load_settings",
    "get_settings",
    "configure_logging",
]
