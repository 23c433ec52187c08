"""
Unit tests for the half-life regression memory model.

Tests:
- Recall probability curve
- Half-life update (extend / shrink / clamp)
- Review threshold
"""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from manas.learning.half_life import (
    SpacedRepetitionConfig,
    hours_between,
    needs_review,
    recall_probability,
    update_half_life,
)


@pytest.fixture
def config():
    return SpacedRepetitionConfig(
        initial_half_life_hours=24,
        correct_multiplier=2.0,
        incorrect_multiplier=0.5,
        review_threshold=0.5,
        min_half_life_hours=1,
        max_half_life_hours=720,
    )


class TestRecallProbability:
    """p = 2^(-t/h)"""

    def test_fresh_memory(self):
        assert recall_probability(0, 24) == 1.0

    def test_one_half_life(self):
        assert recall_probability(24, 24) == pytest.approx(0.5)

    def test_two_half_lives(self):
        assert recall_probability(48, 24) == pytest.approx(0.25)

    def test_strictly_decreasing(self):
        values = [recall_probability(t, 24) for t in range(0, 200, 8)]

        assert all(a > b for a, b in zip(values, values[1:]))

    def test_negative_elapsed_treated_as_zero(self):
        assert recall_probability(-5, 24) == 1.0


class TestUpdateHalfLife:
    """Successes extend, failures shorten, both clamped."""

    def test_correct_extends(self, config):
        assert update_half_life(24, True, config) == 48

    def test_incorrect_shrinks(self, config):
        assert update_half_life(24, False, config) == 12

    def test_clamped_at_max(self, config):
        assert update_half_life(500, True, config) == 720

    def test_clamped_at_min(self, config):
        assert update_half_life(1.5, False, config) == 1

    def test_failure_below_initial(self, config):
        # Lower bound is min_half_life_hours, so a fresh record can still shrink
        shrunk = update_half_life(config.initial_half_life_hours, False, config)

        assert config.min_half_life_hours <= shrunk < config.initial_half_life_hours

    @pytest.mark.parametrize("half_life", [1.5, 24, 100, 359])
    def test_monotone_inside_range(self, config, half_life):
        assert update_half_life(half_life, True, config) > half_life
        assert update_half_life(half_life, False, config) < half_life


class TestNeedsReview:
    """Review once recall drops below the threshold."""

    def test_exactly_one_half_life_is_not_due(self, config):
        assert not needs_review(24, 24, config)

    def test_past_one_half_life_is_due(self, config):
        assert needs_review(25, 24, config)

    def test_longer_half_life_delays_review(self, config):
        assert needs_review(30, 24, config)
        assert not needs_review(30, 48, config)


class TestConfig:
    def test_initial_outside_bounds_rejected(self):
        with pytest.raises(ValidationError):
            SpacedRepetitionConfig(initial_half_life_hours=1000, max_half_life_hours=720)


def test_hours_between():
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)

    assert hours_between(start, start + timedelta(hours=36, minutes=30)) == pytest.approx(36.5)
