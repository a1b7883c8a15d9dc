"""Environment-based configuration using pydantic-settings.

Example:
    >>> from waitcase.foundation.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.logging.level)
    'INFO'
    >>> print(settings.combinator.task_name_prefix)
    'waitcase'

    # Or with environment variables:
    # WAITCASE_LOG_LEVEL=DEBUG
    # WAITCASE_COMBINATOR_INVALID_LOG_LEVEL=ERROR
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WAITCASE_LOG_",
        extra="ignore",
    )

    level: LogLevel = "INFO"
    format: Literal["console", "json", "none"] = "console"

    @field_validator("level", mode="before")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class CombinatorSettings(BaseSettings):
    """Combinator engine behaviour."""

    model_config = SettingsConfigDict(
        env_prefix="WAITCASE_COMBINATOR_",
        extra="ignore",
    )

    invalid_log_level: LogLevel = Field(
        default="WARNING",
        description="Level used when reporting inputs that are neither Events nor Tasks",
    )
    task_name_prefix: str = Field(
        default="waitcase",
        min_length=1,
        description="Prefix for asyncio task names created by task bridges",
    )

    @field_validator("invalid_log_level", mode="before")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class WaitcaseSettings(BaseSettings):
    """Root settings for waitcase.

    Loads configuration from environment variables with WAITCASE_ prefix.

    Example environment variables:
        WAITCASE_DEBUG=true
        WAITCASE_LOG_FORMAT=json
        WAITCASE_COMBINATOR_TASK_NAME_PREFIX=jobs
    """

    model_config = SettingsConfigDict(
        env_prefix="WAITCASE_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    debug: bool = Field(default=False, description="Enable debug mode")

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    combinator: CombinatorSettings = Field(default_factory=CombinatorSettings)


@lru_cache(maxsize=1)
def get_settings() -> WaitcaseSettings:
    """Get the global settings instance (cached)."""
    return WaitcaseSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
