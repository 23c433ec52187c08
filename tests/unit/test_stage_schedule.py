"""
Unit tests for the Stage Schedule Generator.

Tests:
- Strong/weak sandwich ordering
- Stage size, trial counts and stage offset per age group
- Review injection and its cap
- Manual game lists
"""

from datetime import timedelta

import pytest

from manas.core.catalogue import DOMAIN_TO_GAME, AgeRange
from manas.study.stage_schedule import (
    StageConfig,
    StageScheduleGenerator,
    generate_personalized_domain_order,
)


@pytest.fixture
def generator(tracker):
    return StageScheduleGenerator(tracker)


class TestPersonalizedOrder:
    """Behavioral momentum: strong, weak, strong, weak..."""

    def test_sandwich(self):
        order = generate_personalized_domain_order(
            {"a": 0.9, "b": 0.3, "c": 0.8, "d": 0.5},
            default_order=["a", "b", "c", "d", "e"],
        )

        assert order == ["a", "d", "c", "b", "e"]

    def test_no_data_keeps_default_order(self):
        assert generate_personalized_domain_order({}, ["x", "y", "z"]) == ["x", "y", "z"]

    def test_ties_keep_default_order(self):
        order = generate_personalized_domain_order({"b": 0.5, "a": 0.5}, ["a", "b", "c"])

        assert order == ["a", "b", "c"]

    def test_only_weak_domains(self):
        order = generate_personalized_domain_order({"b": 0.2, "c": 0.4}, ["a", "b", "c"])

        assert order == ["c", "b", "a"]

    def test_none_means_no_data(self):
        order = generate_personalized_domain_order({"c": None, "b": 0.9}, ["a", "b", "c"])

        assert order == ["b", "a", "c"]


class TestStageComposition:
    """Stage size, trial counts and offsets."""

    @pytest.mark.parametrize(
        "age_group, games, trials",
        [("3-5", 2, 9), ("6-9", 4, 13), ("10-15", 5, 16)],
    )
    def test_size_and_trials_per_age(self, generator, now, age_group, games, trials):
        stage = generator.generate_stage_games(age_group, 1, now)

        assert len(stage) == games
        assert all(game.trial_count == trials for game in stage)

    def test_first_stage_follows_default_order(self, generator, now):
        stage = generator.generate_stage_games("6-9", 1, now)

        assert [g.domain for g in stage] == [
            "processing_speed",
            "attention",
            "motor_skills",
            "working_memory",
        ]
        assert [g.game_id for g in stage] == [DOMAIN_TO_GAME[g.domain] for g in stage]
        assert not any(g.is_review or g.is_completed for g in stage)

    def test_stage_offset(self, generator, now):
        stage = generator.generate_stage_games("6-9", 2, now)

        # offset = (2 - 1) * 3
        assert [g.domain for g in stage] == [
            "working_memory",
            "visuospatial",
            "memory",
            "perceptual",
        ]

    def test_offset_wraps_around(self, generator, now):
        stage = generator.generate_stage_games("6-9", 5, now)

        # offset 12 -> the last three domains, then back to the start
        assert [g.domain for g in stage] == [
            "emotion_regulation",
            "social_cognition",
            "language",
            "processing_speed",
        ]

    def test_strong_domain_first_without_duplicates(self, tracker, generator, now):
        tracker.record_session_result("language", "kotoba-catch", 0.9, now)
        tracker.record_session_result("attention", "hikari-catch", 0.5, now)

        stage = generator.generate_stage_games("6-9", 1, now)
        domains = [g.domain for g in stage]

        assert 3 <= len(stage) <= 5
        assert len(set(domains)) == len(domains)
        assert domains[0] == "language"
        assert domains[1] == "attention"

    def test_pool_exhaustion_shortens_stage(self, tracker, now):
        config = StageConfig(domain_order=("attention", "memory"))
        generator = StageScheduleGenerator(tracker, config)

        stage = generator.generate_stage_games("10-15", 1, now)

        assert [g.domain for g in stage] == ["attention", "memory"]

    def test_unknown_age_group(self, generator, now):
        with pytest.raises(ValueError):
            generator.generate_stage_games("7-8", 1, now)


class TestReviewInjection:
    """Decayed domains come first as review games."""

    def test_review_game_first(self, tracker, generator, now):
        tracker.record_session_result("memory", "oboete-match", 0.9, now)

        stage = generator.generate_stage_games("10-15", 1, now + timedelta(hours=48))

        assert len(stage) == 5
        assert stage[0].domain == "memory"
        assert stage[0].is_review
        assert not any(g.is_review for g in stage[1:])
        assert [g.domain for g in stage].count("memory") == 1

    def test_no_review_slot_for_small_stages(self, tracker, generator, now):
        tracker.record_session_result("memory", "oboete-match", 0.9, now)

        stage = generator.generate_stage_games("3-5", 1, now + timedelta(hours=48))

        assert not any(g.is_review for g in stage)

    def test_review_cap(self, tracker, now):
        due = ["attention", "memory", "planning", "reasoning", "language"]
        for hours, domain in enumerate(due):
            tracker.record_session_result(domain, DOMAIN_TO_GAME[domain], 0.9, now - timedelta(hours=hours))
        config = StageConfig(games_per_stage={"6-9": AgeRange(min=9, max=9)})
        generator = StageScheduleGenerator(tracker, config)

        stage = generator.generate_stage_games("6-9", 1, now + timedelta(hours=72))
        reviews = [g for g in stage if g.is_review]

        assert len(stage) == 9
        assert len(reviews) == 3
        # earliest due first
        assert [g.domain for g in reviews] == ["language", "reasoning", "planning"]
        assert len({g.domain for g in stage}) == 9

    def test_review_domain_without_game_skipped(self, tracker, now):
        tracker.record_session_result("juggling", "juggle-game", 0.9, now)
        tracker.record_session_result("memory", "oboete-match", 0.9, now + timedelta(hours=1))

        stage = StageScheduleGenerator(tracker).generate_stage_games(
            "10-15", 1, now + timedelta(hours=72)
        )

        assert stage[0].domain == "memory"
        assert stage[0].is_review


class TestGameList:
    """Stages built from an explicit game list."""

    def test_direct_mapping(self, generator):
        stage = generator.generate_from_game_list(["matte-stop", "oboete-match"], "3-5")

        assert [(g.game_id, g.domain) for g in stage] == [
            ("matte-stop", "inhibition"),
            ("oboete-match", "memory"),
        ]
        assert all(g.trial_count == 9 and not g.is_review for g in stage)

    def test_unknown_game_falls_back_to_attention(self, generator):
        stage = generator.generate_from_game_list(["mystery-game"], "6-9")

        assert stage[0].domain == "attention"
        assert stage[0].game_id == "mystery-game"
