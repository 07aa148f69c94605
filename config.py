"""
Configuration settings for the facet mastery engine.

Uses Pydantic Settings for environment variable management with .env file support.
The thresholds below are empirically chosen; they are tunable, not derived.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

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
    # Mastery Tracking (EWMA)
    # ========================================
    ewma_alpha: float = Field(
        default=0.15,
        ge=0.0,
        le=1.0,
        description="EWMA smoothing factor (higher = more weight on recent reviews)",
    )
    accuracy_weight: float = Field(
        default=0.7,
        description="Weight of accuracy in combined mastery",
    )
    speed_weight: float = Field(
        default=0.3,
        description="Weight of speed in combined mastery",
    )

    # ========================================
    # Weakness Detection
    # ========================================
    weakness_threshold: float = Field(
        default=0.7,
        description="Combined mastery below this is weak",
    )
    critical_threshold: float = Field(
        default=0.4,
        description="Combined mastery below this is a critical weakness",
    )
    moderate_threshold: float = Field(
        default=0.55,
        description="Combined mastery below this is a moderate weakness",
    )
    min_sample_size: int = Field(
        default=5,
        ge=0,
        description="Reviews needed before a dimension can be flagged",
    )
    dodging_definition_threshold: float = Field(
        default=0.8,
        description="Definition recall at or above this counts as strong for dodging detection",
    )
    dodging_others_threshold: float = Field(
        default=0.6,
        description="Mean of the other dimensions below this counts as weak for dodging detection",
    )
    fragile_accuracy_threshold: float = Field(
        default=0.7,
        description="Accuracy above this (with slow speed) is fragile confidence",
    )
    fragile_speed_threshold: float = Field(
        default=0.5,
        description="Speed below this (with high accuracy) is fragile confidence",
    )

    # ========================================
    # SM-2 Scheduling
    # ========================================
    min_ease_factor: float = Field(
        default=1.3,
        description="Ease factor floor",
    )
    max_ease_factor: float = Field(
        default=2.5,
        description="Ease factor ceiling",
    )
    default_ease_factor: float = Field(
        default=2.5,
        description="Ease factor for new concepts",
    )
    min_interval_days: float = Field(
        default=1.0,
        description="Shortest interval between reviews (days)",
    )
    hard_interval_multiplier: float = Field(
        default=1.2,
        description="Interval multiplier for 'hard' ratings",
    )

    # ========================================
    # Variant Selection Safety Rails
    # ========================================
    session_dimension_cap: float = Field(
        default=0.7,
        description="Max share of a session any single dimension may take",
    )
    maintenance_min_percentage: float = Field(
        default=0.2,
        description="Min share of a session reserved for strong dimensions",
    )
    maintenance_min_cards: int = Field(
        default=5,
        description="Cards shown before maintenance reps are enforced",
    )
    strong_threshold: float = Field(
        default=0.7,
        description="Combined mastery at or above this is a strong dimension",
    )
    confidence_card_failures: int = Field(
        default=3,
        description="Consecutive failures that trigger a confidence card",
    )
    confidence_card_max_difficulty: int = Field(
        default=2,
        ge=1,
        le=5,
        description="Hardest difficulty allowed for a confidence card",
    )
    session_timeout_minutes: int = Field(
        default=30,
        description="Session state resets after this many minutes",
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


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
