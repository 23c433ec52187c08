"""
Unit tests for per-child DDA profiles.

Tests:
- Diagnosis -> disability type priority
- Band table
- Applying a profile to a game config
"""

import pytest
from pydantic import ValidationError

from manas.adaptive.difficulty_controller import DifficultyController
from manas.adaptive.profiles import (
    DDA_PROFILES,
    DDAProfile,
    apply_profile,
    derive_disability_type,
    get_profile,
)
from manas.core.catalogue import get_game
from manas.core.types import ChangeReason


class TestDeriveDisabilityType:
    """The diagnosis needing the most support decides the profile."""

    @pytest.mark.parametrize(
        "diagnoses, expected",
        [
            (["asd", "id_severe"], "id-severe"),
            (["asd", "id_moderate"], "id-moderate"),
            (["id_unspecified"], "id-moderate"),
            (["adhd_combined", "asd"], "asd"),
            (["id_mild", "adhd_inattentive"], "adhd"),
            (["adhd_hyperactive"], "adhd"),
            (["borderline_iq"], "id-mild"),
            (["id_mild", "ld"], "id-mild"),
        ],
    )
    def test_priority(self, diagnoses, expected):
        assert derive_disability_type(diagnoses) == expected

    def test_none_means_typical(self):
        assert derive_disability_type(["none"]) == "typical"

    @pytest.mark.parametrize("diagnoses", [None, [], ["ld"], ["dcd", "language_delay"]])
    def test_unknown(self, diagnoses):
        assert derive_disability_type(diagnoses) == "unknown"

    def test_every_result_has_a_profile(self):
        for diagnoses in (["id_severe"], ["asd"], ["adhd_combined"], ["id_mild"], ["none"], []):
            assert derive_disability_type(diagnoses) in DDA_PROFILES


class TestProfileTable:
    @pytest.mark.parametrize(
        "disability_type, band",
        [
            ("asd", (0.80, 0.90)),
            ("adhd", (0.70, 0.85)),
            ("id-severe", (0.85, 0.95)),
            ("id-moderate", (0.80, 0.90)),
            ("id-mild", (0.80, 0.90)),
            ("typical", (0.70, 0.80)),
            ("unknown", (0.75, 0.85)),
        ],
    )
    def test_bands(self, disability_type, band):
        profile = DDA_PROFILES[disability_type]

        assert profile.disability_type == disability_type
        assert (profile.target_accuracy_min, profile.target_accuracy_max) == band

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            DDA_PROFILES["asd"] = DDA_PROFILES["typical"]

    def test_inverted_band_rejected(self):
        with pytest.raises(ValidationError):
            DDAProfile(disability_type="asd", target_accuracy_min=0.9, target_accuracy_max=0.8)

    def test_get_profile_falls_back_to_unknown(self):
        assert get_profile("asd") is DDA_PROFILES["asd"]
        assert get_profile("dyslexia") is DDA_PROFILES["unknown"]


class TestApplyProfile:
    """Only the band changes; the game keeps its window, cooldown and parameters."""

    def test_band_overridden(self):
        base = get_game("hikari-catch").dda
        config = apply_profile(base, DDA_PROFILES["id-severe"])

        assert (config.target_accuracy_min, config.target_accuracy_max) == (0.85, 0.95)
        assert config.window_size == base.window_size
        assert config.min_trials_before_adjust == base.min_trials_before_adjust
        assert config.parameters == base.parameters

    def test_game_config_untouched(self):
        base = get_game("hikari-catch").dda
        band = (base.target_accuracy_min, base.target_accuracy_max)

        apply_profile(base, DDA_PROFILES["id-severe"])
        game = get_game("hikari-catch").dda

        assert (game.target_accuracy_min, game.target_accuracy_max) == band

    def test_no_profile_returns_config(self, two_param_config):
        assert apply_profile(two_param_config, None) is two_param_config

    def test_band_changes_controller_decision(self, two_param_config):
        # Advance once, then hold a 4/5 window: inside the default band, below id-severe's
        outcomes = [True] * 5 + [False, True, True]
        default = DifficultyController(two_param_config)
        severe = DifficultyController(apply_profile(two_param_config, DDA_PROFILES["id-severe"]))

        default_events = [default.record_trial_result(o) for o in outcomes]
        severe_events = [severe.record_trial_result(o) for o in outcomes]

        assert default_events[-1] is None
        assert default.get_current_params()["distractors"] == 1
        assert severe_events[-1].reason == ChangeReason.ACCURACY_LOW
        assert severe.get_current_params()["distractors"] == 0
