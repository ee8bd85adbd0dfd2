"""Application configuration management using Pydantic Settings.

This module defines the `Settings` class, which loads configuration parameters
from environment variables and a `.env` file. Every value here can also be
overridden per run through the matching CLI option.

The `get_settings` function provides a cached, singleton instance of the
configuration, ensuring consistent settings throughout the application.
"""
from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict as _SettingsConfigDict


def normalize_log_level(value: str) -> str:
    """Return the upper-cased level name, or raise ValueError for unknown levels."""
    name = value.strip().upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ValueError(
            f"unknown log level {value!r} (expected one of DEBUG, INFO, WARNING, ERROR, CRITICAL)"
        )
    return name


class Settings(BaseSettings):
    """Defines all application configuration parameters."""

    model_config = _SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")

    # Input discovery & decoding
    FILE_ENCODING: str = Field(
        default="utf-8", description="Text encoding for reading Karate reports and writing the output"
    )
    INPUT_GLOB: str = Field(
        default="*.karate-json.txt",
        description="Pattern used to pick report files when an input argument is a directory",
    )

    # Output
    OUTPUT_INDENT: int = Field(
        default=4, description="JSON indentation for the Cucumber report (0 = compact)"
    )
    FAIL_ON_SKIPPED: bool = Field(
        default=False,
        description=(
            "If true, exit with a non-zero status when any input document was skipped. "
            "The report of the remaining documents is still written."
        ),
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        return normalize_log_level(v)

    @field_validator("OUTPUT_INDENT")
    @classmethod
    def non_negative_indent(cls, v: int) -> int:
        if v < 0:
            raise ValueError("OUTPUT_INDENT must be >= 0")
        return v


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached, singleton instance of the application settings.

    Provides a clearer error naming the offending variables when the
    environment or `.env` holds invalid values.
    """
    try:
        return Settings()
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ())) or '<settings>'}: {err.get('msg')}"
            for err in e.errors()
        )
        raise RuntimeError(f"Invalid configuration: {problems}") from e
