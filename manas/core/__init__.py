"""Shared types and the read-only game catalogue (`manas.core.catalogue`)."""

from manas.core.types import (
    AgeGroup,
    ChangeDirection,
    ChangeReason,
    CognitiveDomain,
    DifficultyDirection,
    ParameterKind,
    ParamValue,
    StageStatus,
)

__all__ = [
    "AgeGroup",
    "ChangeDirection",
    "ChangeReason",
    "CognitiveDomain",
    "DifficultyDirection",
    "ParameterKind",
    "ParamValue",
    "StageStatus",
]
