"""
Shared vocabulary for the adaptive core.

Cognitive domains and age groups are plain strings (validated as Literals
wherever pydantic models carry them); the small closed sets that show up in
outputs are str Enums so they serialize as their values.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Union

CognitiveDomain = Literal[
    "attention",
    "inhibition",
    "working_memory",
    "memory",
    "processing_speed",
    "cognitive_flexibility",
    "planning",
    "reasoning",
    "problem_solving",
    "visuospatial",
    "perceptual",
    "language",
    "social_cognition",
    "emotion_regulation",
    "motor_skills",
]

AgeGroup = Literal["3-5", "6-9", "10-15"]

# Values a difficulty parameter can take (numeric value or categorical level)
ParamValue = Union[int, float, str]


class ParameterKind(str, Enum):
    """How a difficulty parameter moves."""

    NUMERIC = "numeric"
    CATEGORICAL = "categorical"


class DifficultyDirection(str, Enum):
    """Whether increasing a value / level index makes the task harder."""

    UP_IS_HARDER = "up_is_harder"
    DOWN_IS_HARDER = "down_is_harder"


class ChangeDirection(str, Enum):
    """Effect of an adaptive change on task difficulty."""

    INCREASED = "increased"
    DECREASED = "decreased"


class ChangeReason(str, Enum):
    """Why the controller changed a parameter."""

    ACCURACY_HIGH = "accuracy_high"  # windowed accuracy above the band
    ACCURACY_LOW = "accuracy_low"  # windowed accuracy below the band
    SAFETY_OVERRIDE = "safety_override"  # forced by a safety monitor


class StageStatus(str, Enum):
    """Lifecycle of a stage."""

    IDLE = "idle"
    PLAYING = "playing"
    BREAK = "break"
    CELEBRATION = "celebration"
    COMPLETED = "completed"
