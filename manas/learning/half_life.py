"""
Half-Life Regression memory model.

p(recall) = 2^(-t/h), where t is the time since the last session and h the
current half-life: recall probability halves every h hours. A domain is due
for review once p drops below the review threshold. Successes extend h,
failures shorten it, within [min_half_life_hours, max_half_life_hours].

Based on Settles & Meeder (2016), "A Trainable Spaced Repetition Model for
Language Learning".
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from config import get_settings

SECONDS_PER_HOUR = 3600.0


class SpacedRepetitionConfig(BaseModel):
    """Tunable spaced-repetition constants (defaults from settings)."""

    model_config = ConfigDict(frozen=True)

    initial_half_life_hours: float = Field(
        default_factory=lambda: get_settings().initial_half_life_hours, gt=0.0
    )
    correct_multiplier: float = Field(
        default_factory=lambda: get_settings().half_life_correct_multiplier, gt=1.0
    )
    incorrect_multiplier: float = Field(
        default_factory=lambda: get_settings().half_life_incorrect_multiplier, gt=0.0, lt=1.0
    )
    review_threshold: float = Field(
        default_factory=lambda: get_settings().review_threshold, gt=0.0, lt=1.0
    )
    min_half_life_hours: float = Field(
        default_factory=lambda: get_settings().min_half_life_hours, gt=0.0
    )
    max_half_life_hours: float = Field(
        default_factory=lambda: get_settings().max_half_life_hours, gt=0.0
    )

    @model_validator(mode="after")
    def _check_bounds(self) -> SpacedRepetitionConfig:
        if not (
            self.min_half_life_hours <= self.initial_half_life_hours <= self.max_half_life_hours
        ):
            raise ValueError("initial half-life must lie within [min, max]")
        return self


def recall_probability(elapsed_hours: float, half_life_hours: float) -> float:
    """Probability that a skill is still recalled after `elapsed_hours`."""
    if half_life_hours <= 0:
        return 0.0
    return 2.0 ** (-max(elapsed_hours, 0.0) / half_life_hours)


def update_half_life(
    half_life_hours: float,
    was_correct: bool,
    config: SpacedRepetitionConfig | None = None,
) -> float:
    """Extend (success) or shrink (failure) a half-life, clamped to the configured range."""
    config = config or SpacedRepetitionConfig()
    multiplier = config.correct_multiplier if was_correct else config.incorrect_multiplier
    updated = half_life_hours * multiplier
    return min(max(updated, config.min_half_life_hours), config.max_half_life_hours)


def needs_review(
    elapsed_hours: float,
    half_life_hours: float,
    config: SpacedRepetitionConfig | None = None,
) -> bool:
    config = config or SpacedRepetitionConfig()
    return recall_probability(elapsed_hours, half_life_hours) < config.review_threshold


def hours_between(earlier: datetime, later: datetime) -> float:
    return (later - earlier).total_seconds() / SECONDS_PER_HOUR
