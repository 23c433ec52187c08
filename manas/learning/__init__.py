"""
Learning Module - mastery and memory decay.

Provides:
- Half-life regression (recall probability, half-life update, review test)
- MasteryTracker (DTT mastery levels per domain x game)
"""

from manas.learning.half_life import (
    SpacedRepetitionConfig,
    needs_review,
    recall_probability,
    update_half_life,
)
from manas.learning.mastery_tracker import (
    DomainProgress,
    MasteryConfig,
    MasteryRecord,
    MasteryTracker,
    SessionOutcome,
)

__all__ = [
    "DomainProgress",
    "MasteryConfig",
    "MasteryRecord",
    "MasteryTracker",
    "SessionOutcome",
    "SpacedRepetitionConfig",
    "needs_review",
    "recall_probability",
    "update_half_life",
]
