"""Environment configuration and validation.

This module defines strongly-typed application settings loaded from environment variables
(optionally via a local `.env` file).
"""

from __future__ import annotations

import logging

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.rules.weights import PRESETS


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    priority_preset: str = Field(default="balanced", alias="PRIORITY_PRESET")
    export_block_on_warnings: bool = Field(default=False, alias="EXPORT_BLOCK_ON_WARNINGS")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that the log level is one the stdlib `logging` module knows."""

        level = value.strip().upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL must be a logging level name, got {value!r}")
        return level

    @field_validator("priority_preset")
    @classmethod
    def validate_priority_preset(cls, value: str) -> str:
        """Validate that the default weight preset exists."""

        name = value.strip().lower()
        if name not in PRESETS:
            raise ValueError(f"PRIORITY_PRESET must be one of {sorted(PRESETS)}, got {value!r}")
        return name


def load_settings() -> Settings:
    """Load and validate settings from environment variables.

    Raises:
        RuntimeError: If the environment configuration is invalid.
    """

    try:
        return Settings()
    except ValidationError as exc:
        raise RuntimeError(f"Invalid environment configuration: {exc}") from exc
