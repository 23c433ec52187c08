"""
Configuration settings for the manas adaptive core.

Uses Pydantic Settings for environment variable management with .env file support.
Every value here is a default for the immutable component configs
(DDAConfig, MasteryConfig, SpacedRepetitionConfig, BiometricPolicyConfig)
which are built once and injected into each component.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="MANAS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Dynamic Difficulty Adjustment
    # ========================================
    dda_target_accuracy_min: float = Field(
        default=0.70,
        ge=0.0,
        le=1.0,
        description="Lower edge of the target accuracy band",
    )
    dda_target_accuracy_max: float = Field(
        default=0.85,
        ge=0.0,
        le=1.0,
        description="Upper edge of the target accuracy band",
    )
    dda_window_size: int = Field(
        default=5,
        ge=1,
        description="Number of recent trials used for windowed accuracy",
    )
    dda_min_trials_before_adjust: int = Field(
        default=3,
        ge=0,
        description="Trials required since the last change before another",
    )

    # ========================================
    # Biometric Safety Policy
    # ========================================
    biometric_high_load_threshold: float = Field(
        default=75.0,
        ge=0.0,
        le=100.0,
        description="Cognitive load (0-100) at or above which a window counts as high load",
    )
    biometric_low_attention_threshold: float | None = Field(
        default=None,
        description="Attention score (0-100) at or below which a window counts as overload; None disables",
    )
    biometric_consecutive_windows: int = Field(
        default=3,
        ge=1,
        description="Consecutive overloaded aggregation windows before a forced reduction",
    )

    # ========================================
    # Mastery (DTT criterion: 80% x 2 sessions)
    # ========================================
    mastery_accuracy_threshold: float = Field(
        default=0.80,
        ge=0.0,
        le=1.0,
        description="Session accuracy counted as a mastery session",
    )
    mastery_consecutive_sessions: int = Field(
        default=2,
        ge=1,
        description="Back-to-back mastery sessions needed for a level up",
    )
    mastery_regression_margin: float = Field(
        default=0.10,
        ge=0.0,
        description="How far below the threshold a session must fall to flag regression",
    )
    mastery_history_size: int = Field(
        default=10,
        ge=1,
        description="Number of recent session accuracies kept per record",
    )

    # ========================================
    # Spaced Repetition (Half-Life Regression)
    # ========================================
    initial_half_life_hours: float = Field(default=24.0, gt=0.0)
    half_life_correct_multiplier: float = Field(default=2.0, gt=1.0)
    half_life_incorrect_multiplier: float = Field(default=0.5, gt=0.0, lt=1.0)
    review_threshold: float = Field(
        default=0.5,
        gt=0.0,
        lt=1.0,
        description="Recall probability below which a domain is due for review",
    )
    min_half_life_hours: float = Field(default=1.0, gt=0.0)
    max_half_life_hours: float = Field(default=720.0, gt=0.0)  # 30 days

    # ========================================
    # Stage Schedule
    # ========================================
    strong_domain_threshold: float = Field(
        default=0.70,
        ge=0.0,
        le=1.0,
        description="Last accuracy at or above which a domain counts as a strength",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(default="INFO", description="loguru level for CLI sinks")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
