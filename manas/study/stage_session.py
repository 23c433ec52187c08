"""
Stage Session - lifecycle of one stage.

    idle -> playing -> break -> playing -> ... -> celebration -> completed

Ties the schedule generator and the mastery tracker together: completing a
game records its accuracy into the tracker, then either opens a break before
the next game or, after the last one, the celebration. Out-of-order calls
are logged and ignored.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from manas.adaptive.models import DDAConfig
from manas.adaptive.profiles import DDAProfile, apply_profile
from manas.core.catalogue import get_game
from manas.core.types import StageStatus
from manas.learning.mastery_tracker import MasteryTracker, SessionOutcome
from manas.study.stage_schedule import StageGameState, StageScheduleGenerator


@dataclass
class StageState:
    """Snapshot of an active (or finished) stage."""

    status: StageStatus
    stage_number: int
    age_group: str
    games: list[StageGameState]
    current_game_index: int = 0
    stage_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def completed_count(self) -> int:
        return sum(1 for game in self.games if game.is_completed)


class StageSession:
    """Drives one child through a stage."""

    def __init__(
        self,
        age_group: str,
        tracker: Optional[MasteryTracker] = None,
        generator: Optional[StageScheduleGenerator] = None,
        stage_number: int = 1,
        profile: Optional[DDAProfile] = None,
    ):
        self.age_group = age_group
        self.tracker = tracker or MasteryTracker()
        self.generator = generator or StageScheduleGenerator(self.tracker)
        self.default_stage_number = stage_number
        self.profile = profile
        self.state: Optional[StageState] = None

    # =========================================================================
    # Derived state
    # =========================================================================

    @property
    def status(self) -> StageStatus:
        return self.state.status if self.state else StageStatus.IDLE

    @property
    def current_game(self) -> Optional[StageGameState]:
        if self.state is None or self.state.current_game_index >= len(self.state.games):
            return None
        return self.state.games[self.state.current_game_index]

    def current_dda_config(self) -> Optional[DDAConfig]:
        """DDA config for the current game, with the child's profile band applied."""
        game = self.current_game
        if game is None:
            return None
        try:
            config = get_game(game.game_id).dda
        except KeyError:
            logger.warning(f"No DDA config for game '{game.game_id}'")
            return None
        return apply_profile(config, self.profile)

    @property
    def is_active(self) -> bool:
        return self.status == StageStatus.PLAYING

    @property
    def progress(self) -> float:
        """Fraction of the stage's games completed (0.0 - 1.0)."""
        if self.state is None or not self.state.games:
            return 0.0
        return self.state.completed_count / len(self.state.games)

    def _expect(self, action: str, *allowed: StageStatus) -> bool:
        if self.status in allowed:
            return True
        logger.debug(f"{action}() ignored in status '{self.status.value}'")
        return False

    # =========================================================================
    # Transitions
    # =========================================================================

    def start_stage(self, stage_number: Optional[int] = None, now: Optional[datetime] = None) -> StageState:
        """Generate the stage's games and start playing the first one."""
        number = stage_number or self.default_stage_number
        games = self.generator.generate_stage_games(self.age_group, number, now=now)
        self.state = StageState(
            status=StageStatus.PLAYING if games else StageStatus.CELEBRATION,
            stage_number=number,
            age_group=self.age_group,
            games=games,
            started_at=now or datetime.now(timezone.utc),
        )
        logger.info(f"Stage {number} started ({self.state.stage_id})")
        return self.state

    def complete_current_game(
        self,
        accuracy: float,
        trials_completed: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> Optional[SessionOutcome]:
        """
        Mark the current game completed and record it into the tracker.

        Args:
            accuracy: Session accuracy of the game (0.0 - 1.0)
            trials_completed: Trials actually played (defaults to the planned count)
            now: Completion time

        Returns:
            The tracker's SessionOutcome, or None when not playing
        """
        if not self._expect("complete_current_game", StageStatus.PLAYING):
            return None
        state = self.state
        game = self.current_game
        if game is None:
            return None

        game.is_completed = True
        game.accuracy = accuracy
        game.trials_completed = game.trial_count if trials_completed is None else trials_completed

        outcome = self.tracker.record_session_result(game.domain, game.game_id, accuracy, now)

        next_index = state.current_game_index + 1
        if next_index >= len(state.games):
            state.status = StageStatus.CELEBRATION
            logger.info(f"Stage {state.stage_number} finished - celebration")
        else:
            state.current_game_index = next_index
            state.status = StageStatus.BREAK
        return outcome

    def start_break(self) -> None:
        if self._expect("start_break", StageStatus.PLAYING):
            self.state.status = StageStatus.BREAK

    def end_break(self) -> None:
        if self._expect("end_break", StageStatus.BREAK):
            self.state.status = StageStatus.PLAYING

    def skip_to_next_game(self) -> None:
        """Leave the current game without recording it."""
        if not self._expect("skip_to_next_game", StageStatus.PLAYING, StageStatus.BREAK):
            return
        state = self.state
        next_index = state.current_game_index + 1
        if next_index >= len(state.games):
            state.status = StageStatus.CELEBRATION
        else:
            state.current_game_index = next_index
            state.status = StageStatus.PLAYING

    def finish_celebration(self) -> None:
        if self._expect("finish_celebration", StageStatus.CELEBRATION):
            self.state.status = StageStatus.COMPLETED

    def end_stage(self) -> None:
        """Close the stage from any non-idle status."""
        if self._expect(
            "end_stage",
            StageStatus.PLAYING,
            StageStatus.BREAK,
            StageStatus.CELEBRATION,
        ):
            self.state.status = StageStatus.COMPLETED

    def abort_stage(self) -> None:
        """Drop the stage entirely; completed games stay recorded in the tracker."""
        if self.state is not None:
            logger.info(f"Stage {self.state.stage_number} aborted")
        self.state = None
