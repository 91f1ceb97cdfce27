"""
Configuration management for GradeAid scoring.

Uses Pydantic Settings for type-safe configuration loading from environment variables.
All configuration is validated at startup to fail fast on misconfiguration.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every variable is read with the ``GRADEAID_`` prefix, e.g.
    ``GRADEAID_PASSING_SCORE=65``.
    """

    model_config = SettingsConfigDict(
        env_prefix="GRADEAID_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================
    log_level: LogLevel = Field(
        default="INFO",
        description="Minimum level for log records",
    )

    log_file: Path | None = Field(
        default=None,
        description="Optional file to additionally write logs to",
    )

    log_serialize: bool = Field(
        default=False,
        description="Emit log records as JSON lines",
    )

    # ==========================================================================
    # Grading Configuration
    # ==========================================================================
    passing_score: int = Field(
        default=70,
        ge=0,
        le=100,
        description="Minimum percentage counted as a pass",
    )

    # ==========================================================================
    # Output Configuration
    # ==========================================================================
    output_directory: Path = Field(
        default=Path("./output"),
        description="Directory for output reports",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: object) -> object:
        """Accept log levels in any case."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator("output_directory")
    @classmethod
    def validate_output_directory(cls, v: Path) -> Path:
        """Ensure output directory exists or can be created."""
        v.mkdir(parents=True, exist_ok=True)
        return v


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once.
    """
    return Settings()
