"""
Configuration settings for the neon-drift vocabulary runner.

Uses Pydantic Settings for environment variable management with .env file support.
Every field can be overridden with a DRIFT_-prefixed environment variable.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="DRIFT_",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Persistence
    # ========================================
    data_dir: Path = Field(
        default=Path.home() / ".neon-drift",
        description="Directory holding local state",
    )
    state_db_path: Path | None = Field(
        default=None,
        description="SQLite key-value database (defaults to <data_dir>/state.db)",
    )
    stats_key: str = Field(
        default="neonDriftStats_v1",
        description="Versioned key for the per-word mastery mapping",
    )
    daily_key: str = Field(
        default="neonDriftDaily_v1",
        description="Versioned key for the daily goal counter",
    )

    # ========================================
    # Session Defaults
    # ========================================
    daily_target: int = Field(
        default=30,
        ge=1,
        description="Correct answers per day that complete the daily goal",
    )
    choice_count: int = Field(
        default=4,
        ge=2,
        description="Maximum options shown in multiple-choice mode",
    )
    question_seconds: int = Field(
        default=5,
        ge=1,
        description="Per-question countdown in easy difficulty",
    )
    default_session_minutes: int = Field(
        default=10,
        description="Session length when none is given (5, 10, 20)",
    )
    default_difficulty: Literal["easy", "normal", "hard"] = Field(
        default="normal",
        description="Difficulty when none is given",
    )
    export_filename: str = Field(
        default="neon-drift-review.txt",
        description="File name for the missed-word export",
    )

    # ========================================
    # Interface
    # ========================================
    log_level: str = Field(
        default="WARNING",
        description="loguru level for the stderr sink",
    )
    sound: bool = Field(
        default=True,
        description="Ring the terminal bell on answers",
    )

    @property
    def resolved_db_path(self) -> Path:
        """SQLite path, falling back to the data directory."""
        return self.state_db_path or self.data_dir / "state.db"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
