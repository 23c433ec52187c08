"""
Stage Schedule Generator.

Builds the game list of one stage from the child's mastery state:
- Behavioral momentum (Nevin et al., 1983): strong and weak domains are
  sandwiched, starting with a strong one
- Spaced repetition (Settles & Meeder, 2016): domains whose recall decayed
  are injected first as review games
- Stage offset: consecutive stages start at different points of the domain
  order so a child does not see the same combination every time

The generator is a pure function of (age group, stage number, tracker
snapshot, now).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional, Sequence

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from config import get_settings
from manas.core.catalogue import (
    DEFAULT_DOMAIN_ORDER,
    DOMAIN_TO_GAME,
    GAMES_PER_STAGE_BY_AGE,
    TRIALS_PER_GAME_BY_AGE,
    AgeRange,
    age_range,
    domain_for_game,
)
from manas.learning.mastery_tracker import MasteryTracker


class StageConfig(BaseModel):
    """Stage sizing and ordering constants (catalogue and settings by default)."""

    model_config = ConfigDict(frozen=True)

    games_per_stage: Mapping[str, AgeRange] = Field(
        default_factory=lambda: dict(GAMES_PER_STAGE_BY_AGE)
    )
    trials_per_game: Mapping[str, AgeRange] = Field(
        default_factory=lambda: dict(TRIALS_PER_GAME_BY_AGE)
    )
    domain_order: tuple[str, ...] = DEFAULT_DOMAIN_ORDER
    domain_to_game: Mapping[str, str] = Field(default_factory=lambda: dict(DOMAIN_TO_GAME))
    strong_domain_threshold: float = Field(
        default_factory=lambda: get_settings().strong_domain_threshold, ge=0.0, le=1.0
    )
    # One review slot per this many games in the stage
    review_slot_divisor: int = Field(default=3, ge=1)


@dataclass
class StageGameState:
    """One game slot of a stage."""

    game_id: str
    domain: str
    trial_count: int
    is_review: bool = False
    is_completed: bool = False
    accuracy: float = 0.0
    trials_completed: int = 0


def generate_personalized_domain_order(
    domain_accuracies: Mapping[str, Optional[float]],
    default_order: Sequence[str] = DEFAULT_DOMAIN_ORDER,
    strong_threshold: float = 0.7,
) -> list[str]:
    """
    Order domains strong/weak alternating, starting with a strong one.

    Args:
        domain_accuracies: Latest accuracy per domain (None = no data)
        default_order: Order used for ties and for domains without data
        strong_threshold: Accuracy at or above which a domain counts as strong

    Returns:
        Every domain of `default_order` exactly once
    """
    with_data = [d for d in default_order if domain_accuracies.get(d) is not None]
    without_data = [d for d in default_order if domain_accuracies.get(d) is None]

    # sorted() is stable, so ties keep the default order
    with_data = sorted(with_data, key=lambda d: domain_accuracies[d], reverse=True)
    strong = [d for d in with_data if domain_accuracies[d] >= strong_threshold]
    weak = [d for d in with_data if domain_accuracies[d] < strong_threshold]

    order: list[str] = []
    for i in range(max(len(strong), len(weak))):
        if i < len(strong):
            order.append(strong[i])
        if i < len(weak):
            order.append(weak[i])

    order.extend(without_data)
    return order


class StageScheduleGenerator:
    """Assembles stages from a MasteryTracker snapshot."""

    def __init__(self, tracker: MasteryTracker, config: Optional[StageConfig] = None):
        self.tracker = tracker
        self.config = config or StageConfig()

    def _trial_count(self, age_group: str) -> int:
        return age_range(self.config.trials_per_game, age_group).midpoint

    def domain_order(self) -> list[str]:
        """Personalized domain order from the tracker's progress snapshot."""
        summary = self.tracker.get_progress_summary()
        accuracies = {domain: progress.last_accuracy for domain, progress in summary.items()}
        return generate_personalized_domain_order(
            accuracies,
            self.config.domain_order,
            self.config.strong_domain_threshold,
        )

    def generate_stage_games(
        self,
        age_group: str,
        stage_number: int,
        now: Optional[datetime] = None,
    ) -> list[StageGameState]:
        """
        Generate the game list for a stage.

        Review games come first, then new games walked from the personalized
        domain order starting at the stage offset.

        Args:
            age_group: "3-5", "6-9" or "10-15"
            stage_number: 1-based stage number (drives the offset)
            now: Reference time for the review check

        Returns:
            Ordered StageGameState list (shorter than the target only when
            the domain pool runs out)

        Raises:
            ValueError: Unknown age group
        """
        games_range = age_range(self.config.games_per_stage, age_group)
        trial_count = self._trial_count(age_group)
        target = (games_range.min + games_range.max) // 2

        domain_order = self.domain_order()

        # Review slots (earliest due first)
        review_cap = target // self.config.review_slot_divisor
        review_domains: list[str] = []
        for domain in self.tracker.get_domains_needing_review(now):
            if len(review_domains) >= review_cap:
                break
            if domain in review_domains:
                continue
            if domain not in self.config.domain_to_game:
                logger.warning(f"Review domain '{domain}' has no game - skipped")
                continue
            review_domains.append(domain)

        stage = [
            StageGameState(
                game_id=self.config.domain_to_game[domain],
                domain=domain,
                trial_count=trial_count,
                is_review=True,
            )
            for domain in review_domains
        ]

        # New slots: walk the ring from the stage offset
        offset = (max(stage_number, 1) - 1) * games_range.min
        used = set(review_domains)
        for i in range(len(domain_order)):
            if len(stage) >= target:
                break
            domain = domain_order[(offset + i) % len(domain_order)]
            if domain in used:
                continue
            game_id = self.config.domain_to_game.get(domain)
            if game_id is None:
                continue
            used.add(domain)
            stage.append(StageGameState(game_id=game_id, domain=domain, trial_count=trial_count))

        logger.info(
            f"Stage {stage_number} ({age_group}): {len(stage)} games, "
            f"{len(review_domains)} review"
        )
        return stage

    def generate_from_game_list(
        self, game_ids: Sequence[str], age_group: str
    ) -> list[StageGameState]:
        """Stage from an explicit game list (manual selection, no review)."""
        trial_count = self._trial_count(age_group)
        game_to_domain = {game: domain for domain, game in self.config.domain_to_game.items()}

        stage = []
        for game_id in game_ids:
            domain = game_to_domain.get(game_id)
            if domain is None:
                domain = domain_for_game(game_id)
                logger.warning(f"Unknown game '{game_id}' - using domain '{domain}'")
            stage.append(StageGameState(game_id=game_id, domain=domain, trial_count=trial_count))
        return stage
