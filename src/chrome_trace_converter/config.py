"""Application configuration management using Pydantic Settings.

This module defines the `Settings` class, which loads configuration parameters
from environment variables and a `.env` file. Only runtime knobs live here:
the log level and the Cap'n Proto reader limits. Input and output paths are
command-line arguments, not settings.

The `get_settings` function provides a cached, singleton instance of the
configuration, ensuring consistent settings throughout the application.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict as _SettingsConfigDict


class Settings(BaseSettings):
    """Defines all application configuration parameters.

    Reader limits left unset fall back to Cap'n Proto's own defaults
    (8 Mi words traversal, nesting depth 64).
    """

    model_config = _SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Logging goes to stderr; stdout is reserved for trace data.
    LOG_LEVEL: str = Field(default="WARNING", description="Logging level")

    # Cap'n Proto reader options
    TRAVERSAL_LIMIT_IN_WORDS: Optional[int] = Field(
        default=None,
        gt=0,
        description="Maximum words a single record may traverse before decoding fails",
    )
    NESTING_LIMIT: Optional[int] = Field(
        default=None,
        gt=0,
        description="Maximum pointer nesting depth of a single record",
    )

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> str:
        """Upper-case the level name and reject names `logging` does not know."""
        if not isinstance(v, str) or not v.strip():
            return "WARNING"
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level {v!r}")
        return level


@lru_cache(maxsize=1)
def get_settings() -> Settings:  # pragma: no cover - trivial
    """Return a cached, singleton instance of the application settings."""
    return Settings()


__all__ = ["Settings", "get_settings"]
