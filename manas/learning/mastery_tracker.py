"""
Mastery Tracker - cross-session mastery and spaced repetition.

Separates "can the child do this right now, with live difficulty tuning"
(the difficulty controller) from "has the child durably learned this, and
when will it fade" (this tracker). Updated once per completed session.

Design:
- DTT mastery criterion: >= 80% accuracy in 2 consecutive sessions = one
  level up (Leaf & McEachin, 1999); five levels
- Regression detection: a sub-threshold session well below the criterion on
  an already-advanced skill is reported, never applied to the level
- Half-life regression per domain x game schedules review
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from config import get_settings
from manas.learning.half_life import (
    SpacedRepetitionConfig,
    hours_between,
    needs_review,
    recall_probability,
    update_half_life,
)

MAX_LEVEL = 5


class MasteryConfig(BaseModel):
    """Mastery criterion constants (defaults from settings)."""

    model_config = ConfigDict(frozen=True)

    accuracy_threshold: float = Field(
        default_factory=lambda: get_settings().mastery_accuracy_threshold, ge=0.0, le=1.0
    )
    consecutive_sessions: int = Field(
        default_factory=lambda: get_settings().mastery_consecutive_sessions, ge=1
    )
    regression_margin: float = Field(
        default_factory=lambda: get_settings().mastery_regression_margin, ge=0.0
    )
    history_size: int = Field(default_factory=lambda: get_settings().mastery_history_size, ge=1)
    max_level: int = Field(default=MAX_LEVEL, ge=1)


class MasteryRecord(BaseModel):
    """Mastery state of one child for one domain x game pair."""

    domain: str
    game_id: str
    level: int = Field(default=1, ge=1, le=MAX_LEVEL)
    consecutive_mastery_sessions: int = Field(default=0, ge=0)
    recent_accuracies: list[float] = Field(default_factory=list)
    last_played_at: datetime | None = None
    half_life_hours: float = Field(gt=0.0)
    next_review_at: datetime | None = None

    @property
    def last_accuracy(self) -> float | None:
        return self.recent_accuracies[-1] if self.recent_accuracies else None

    @property
    def due_at(self) -> datetime | None:
        """When recall is expected to have decayed to 50% (derived from last play)."""
        if self.last_played_at is None:
            return None
        return self.last_played_at + timedelta(hours=self.half_life_hours)


@dataclass(frozen=True)
class SessionOutcome:
    """Result of recording one session."""

    level_changed: bool
    new_level: int
    regression: bool


@dataclass(frozen=True)
class DomainProgress:
    """Per-domain snapshot consumed by the stage schedule generator."""

    level: int
    last_accuracy: float | None


def _as_utc(moment: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


class MasteryTracker:
    """
    Per-child mastery records keyed by (domain, game_id).

    Single writer: the host must serialize session-end updates for a child.
    """

    def __init__(
        self,
        config: MasteryConfig | None = None,
        spaced_repetition: SpacedRepetitionConfig | None = None,
    ):
        self.config = config or MasteryConfig()
        self.spaced_repetition = spaced_repetition or SpacedRepetitionConfig()
        self._records: dict[tuple[str, str], MasteryRecord] = {}

    # =========================================================================
    # Records
    # =========================================================================

    def get_record(self, domain: str, game_id: str) -> MasteryRecord:
        """Get the record for a pair, creating a fresh level-1 record if absent."""
        key = (domain, game_id)
        record = self._records.get(key)
        if record is None:
            record = MasteryRecord(
                domain=domain,
                game_id=game_id,
                half_life_hours=self.spaced_repetition.initial_half_life_hours,
            )
            self._records[key] = record
        return record

    def all_records(self) -> list[MasteryRecord]:
        return list(self._records.values())

    def get_level(self, domain: str, game_id: str) -> int:
        return self.get_record(domain, game_id).level

    # =========================================================================
    # Session updates
    # =========================================================================

    def record_session_result(
        self,
        domain: str,
        game_id: str,
        accuracy: float,
        now: datetime | None = None,
    ) -> SessionOutcome:
        """
        Apply one completed session's accuracy.

        Args:
            domain: Cognitive domain of the session
            game_id: Game that was played
            accuracy: Session accuracy (clamped into [0, 1])
            now: Session end time (defaults to the current UTC time)

        Returns:
            SessionOutcome with the (possibly unchanged) level and the
            regression flag
        """
        now = _as_utc(now or datetime.now(timezone.utc))
        if not 0.0 <= accuracy <= 1.0:
            logger.warning(f"Accuracy {accuracy} for {domain}:{game_id} outside [0, 1] - clamped")
            accuracy = min(max(accuracy, 0.0), 1.0)

        config = self.config
        record = self.get_record(domain, game_id)
        record.last_played_at = now
        record.recent_accuracies.append(accuracy)
        del record.recent_accuracies[: -config.history_size]

        old_level = record.level
        regression = False

        if accuracy >= config.accuracy_threshold:
            record.consecutive_mastery_sessions += 1
            if record.consecutive_mastery_sessions >= config.consecutive_sessions:
                record.level = min(record.level + 1, config.max_level)
                record.consecutive_mastery_sessions = 0
                record.half_life_hours = update_half_life(
                    record.half_life_hours, True, self.spaced_repetition
                )
        else:
            record.consecutive_mastery_sessions = 0
            record.half_life_hours = update_half_life(
                record.half_life_hours, False, self.spaced_repetition
            )
            if (
                record.level >= 2
                and accuracy < config.accuracy_threshold - config.regression_margin
            ):
                regression = True
                logger.warning(
                    f"Regression in {domain}:{game_id} at level {record.level} "
                    f"(accuracy={accuracy:.2f})"
                )

        record.next_review_at = now + timedelta(hours=record.half_life_hours)

        level_changed = record.level != old_level
        if level_changed:
            logger.info(f"Mastery level up: {domain}:{game_id} {old_level} -> {record.level}")

        return SessionOutcome(
            level_changed=level_changed,
            new_level=record.level,
            regression=regression,
        )

    # =========================================================================
    # Snapshots for scheduling
    # =========================================================================

    def recall_probability(self, domain: str, game_id: str, now: datetime | None = None) -> float:
        """Current recall estimate for a pair (1.0 when never played)."""
        record = self._records.get((domain, game_id))
        if record is None or record.last_played_at is None:
            return 1.0
        now = _as_utc(now or datetime.now(timezone.utc))
        return recall_probability(hours_between(record.last_played_at, now), record.half_life_hours)

    def get_domains_needing_review(self, now: datetime | None = None) -> list[str]:
        """Domains whose recall probability fell below the review threshold, earliest due first."""
        now = _as_utc(now or datetime.now(timezone.utc))
        due: list[tuple[datetime, str]] = []

        for record in self._records.values():
            if record.last_played_at is None:
                continue
            elapsed = hours_between(record.last_played_at, now)
            if needs_review(elapsed, record.half_life_hours, self.spaced_repetition):
                due.append((record.next_review_at or record.due_at, record.domain))

        due.sort(key=lambda item: item[0])
        domains: list[str] = []
        for _, domain in due:
            if domain not in domains:
                domains.append(domain)
        return domains

    def get_progress_summary(self) -> dict[str, DomainProgress]:
        """Level and latest accuracy per domain (most recently played game wins)."""
        summary: dict[str, DomainProgress] = {}
        latest: dict[str, datetime | None] = {}

        for record in self._records.values():
            played = record.last_played_at
            if record.domain in summary:
                previous = latest[record.domain]
                if played is None or (previous is not None and played <= previous):
                    continue
            summary[record.domain] = DomainProgress(
                level=record.level, last_accuracy=record.last_accuracy
            )
            latest[record.domain] = played

        return summary

    # =========================================================================
    # Persistence hand-off
    # =========================================================================

    def serialize(self) -> list[dict[str, Any]]:
        """Full state export (JSON-friendly)."""
        return [record.model_dump(mode="json") for record in self._records.values()]

    def restore(self, records: Iterable[MasteryRecord | dict[str, Any]]) -> None:
        """
        Replace the whole state with `records`.

        Every record is validated before anything is swapped, so a malformed
        snapshot leaves the current state untouched.
        """
        restored: dict[tuple[str, str], MasteryRecord] = {}
        for raw in records:
            record = MasteryRecord.model_validate(
                raw.model_dump() if isinstance(raw, MasteryRecord) else raw
            )
            if record.last_played_at is not None:
                record.last_played_at = _as_utc(record.last_played_at)
            if record.next_review_at is not None:
                record.next_review_at = _as_utc(record.next_review_at)
            restored[(record.domain, record.game_id)] = record

        self._records = restored
        logger.debug(f"Restored {len(restored)} mastery records")
