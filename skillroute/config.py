"""
Configuration settings for the SkillRoute adaptive learning engine.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="SKILLROUTE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Database
    # ========================================
    database_url: str = Field(
        default="sqlite:///skillroute.db",
        description="SQLAlchemy connection string for the review item store",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Logging verbosity level",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (None for stderr only)",
    )

    # ========================================
    # SM-2 Scheduling
    # ========================================
    sm2_initial_easiness: float = Field(
        default=2.5,
        description="Easiness factor assigned to newly enrolled items",
    )
    sm2_minimum_easiness: float = Field(
        default=1.3,
        description="Floor applied to the easiness factor on every transition",
    )
    sm2_first_interval: int = Field(
        default=1,
        description="Interval (days) after the first successful recall",
    )
    sm2_second_interval: int = Field(
        default=6,
        description="Interval (days) after the second successful recall",
    )

    # ========================================
    # Quality Classification
    # ========================================
    quality_avg_time_ms: int = Field(
        default=15000,
        description="Reference answer time used to grade response speed",
    )

    # ========================================
    # Review Queue
    # ========================================
    review_max_items: int = Field(
        default=20,
        description="Maximum items returned by the due queue",
    )
    review_upcoming_hours: int = Field(
        default=24,
        description="Window (hours) counted as 'upcoming' in review stats",
    )
    mastered_repetitions: int = Field(
        default=5,
        description="Consecutive recalls required to count an item as mastered",
    )
    mastered_easiness: float = Field(
        default=2.5,
        description="Minimum easiness factor for a mastered item",
    )
    struggling_easiness: float = Field(
        default=1.8,
        description="Items below this easiness factor count as struggling",
    )

    # ========================================
    # Proficiency & Skill Status
    # ========================================
    proficiency_decay_days: float = Field(
        default=30.0,
        description="Time constant (days) of the recency decay",
    )
    confidence_saturation: int = Field(
        default=5,
        description="Reviewed items needed for full confidence",
    )
    untested_confidence: float = Field(
        default=0.2,
        description="Below this confidence a skill is reported as untested",
    )
    strong_threshold: float = Field(
        default=0.8,
        description="Proficiency at or above which a skill is strong",
    )
    moderate_threshold: float = Field(
        default=0.5,
        description="Proficiency at or above which a skill is moderate",
    )

    # ========================================
    # Diagnostic Selection
    # ========================================
    diagnostic_default_count: int = Field(
        default=10,
        description="Questions in a diagnostic assessment",
    )
    diagnostic_iteration_factor: int = Field(
        default=10,
        description="Idle topic visits allowed per topic before selection stops",
    )

    # ========================================
    # Feature Flags
    # ========================================
    feature_flag_ttl_seconds: float = Field(
        default=60.0,
        description="How long loaded feature flags are reused before reloading",
    )

    def get_sm2_config(self) -> dict[str, float | int]:
        """Get SM-2 configuration as keyword arguments."""
        return {
            "initial_easiness": self.sm2_initial_easiness,
            "minimum_easiness": self.sm2_minimum_easiness,
            "first_interval": self.sm2_first_interval,
            "second_interval": self.sm2_second_interval,
        }

    def get_status_thresholds(self) -> dict[str, float]:
        """Get skill status thresholds as keyword arguments."""
        return {
            "untested_confidence": self.untested_confidence,
            "strong_threshold": self.strong_threshold,
            "moderate_threshold": self.moderate_threshold,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
