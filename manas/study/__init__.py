"""
Stage Module.

Provides:
- StageScheduleGenerator: personalized, review-aware stage composition
- StageSession: stage lifecycle (playing, breaks, celebration)
"""

from manas.study.stage_schedule import (
    StageConfig,
    StageGameState,
    StageScheduleGenerator,
    generate_personalized_domain_order,
)
from manas.study.stage_session import StageSession, StageState

__all__ = [
    "StageConfig",
    "StageGameState",
    "StageScheduleGenerator",
    "StageSession",
    "StageState",
    "generate_personalized_domain_order",
]
