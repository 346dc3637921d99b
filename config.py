"""
Configuration settings for the adaptive learning service.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default="sqlite:///./adaptive_learning.db",
        description="SQLAlchemy connection string (PostgreSQL in production)",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path (rotated at 10 MB)",
    )

    # ========================================
    # API Server
    # ========================================
    api_host: str = Field(
        default="127.0.0.1",
        description="API server host",
    )
    api_port: int = Field(
        default=8100,
        description="API server port",
    )

    # ========================================
    # Adaptive Engine
    # ========================================
    history_window_size: int = Field(
        default=20,
        ge=1,
        description="Most recent activity records used to build a learner profile",
    )
    recent_window_size: int = Field(
        default=5,
        ge=1,
        description="Most recent records used for difficulty transitions and reasoning",
    )
    passing_percentage: int = Field(
        default=70,
        ge=0,
        le=100,
        description="Minimum percentage counted as a successful attempt",
    )
    confidence_sample_size: int = Field(
        default=10,
        ge=1,
        description="Attempts needed before confidence carries full sample-size weight",
    )
    response_time_ceiling_seconds: float = Field(
        default=300.0,
        gt=0,
        description="Average response time at which the mastery speed term reaches 0",
    )
    refresh_workers: int = Field(
        default=2,
        ge=1,
        description="Worker threads for post-completion annotation refresh",
    )

    def get_adaptive_config(self) -> dict[str, Any]:
        """Get adaptive engine configuration as a dictionary."""
        return {
            "history_window_size": self.history_window_size,
            "recent_window_size": self.recent_window_size,
            "passing_percentage": self.passing_percentage,
            "confidence_sample_size": self.confidence_sample_size,
            "response_time_ceiling_seconds": self.response_time_ceiling_seconds,
            "refresh_workers": self.refresh_workers,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
