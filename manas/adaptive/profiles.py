"""
Per-child DDA profiles.

The target accuracy band depends on the child's support needs:
- ASD: strong failure avoidance, success-heavy band (80-90%)
- ADHD: moderate challenge to prevent boredom (70-85%)
- ID severe: guards against learned helplessness (85-95%)
- ID moderate / mild: same band as ASD (80-90%)
- Typical: avoids ceiling and floor effects (70-80%)
- Unknown: middle ground (75-85%)

The profile only overrides the band of a game's DDAConfig; window,
cooldown and parameters stay as the game defines them.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Literal, Mapping, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, model_validator

from manas.adaptive.models import DDAConfig

DisabilityType = Literal[
    "asd",
    "adhd",
    "id-severe",
    "id-moderate",
    "id-mild",
    "typical",
    "unknown",
]

ADHD_DIAGNOSES = frozenset({"adhd_inattentive", "adhd_hyperactive", "adhd_combined"})


class DDAProfile(BaseModel):
    """Target accuracy band for one disability type."""

    model_config = ConfigDict(frozen=True)

    disability_type: DisabilityType
    target_accuracy_min: float = Field(ge=0.0, le=1.0)
    target_accuracy_max: float = Field(ge=0.0, le=1.0)

    @model_validator(mode="after")
    def _check_band(self) -> DDAProfile:
        if self.target_accuracy_min > self.target_accuracy_max:
            raise ValueError(f"profile '{self.disability_type}' has an inverted band")
        return self


def _profile(disability_type: str, lo: float, hi: float) -> DDAProfile:
    return DDAProfile(disability_type=disability_type, target_accuracy_min=lo, target_accuracy_max=hi)


DDA_PROFILES: Mapping[str, DDAProfile] = MappingProxyType({
    "asd": _profile("asd", 0.80, 0.90),
    "adhd": _profile("adhd", 0.70, 0.85),
    "id-severe": _profile("id-severe", 0.85, 0.95),
    "id-moderate": _profile("id-moderate", 0.80, 0.90),
    "id-mild": _profile("id-mild", 0.80, 0.90),
    "typical": _profile("typical", 0.70, 0.80),
    "unknown": _profile("unknown", 0.75, 0.85),
})


def derive_disability_type(disabilities: Optional[Iterable[str]]) -> str:
    """
    Map onboarding diagnoses to a disability type.

    The trait needing the most support wins:
    id_severe > id_moderate (and id_unspecified) > asd > adhd_* > id_mild
    (and borderline_iq). Only "none" means typical; an empty list, or only
    diagnoses without a dedicated profile (LD, DCD, language delay), give
    unknown.
    """
    diagnoses = list(disabilities or [])
    if not diagnoses:
        return "unknown"
    if diagnoses == ["none"]:
        return "typical"

    present = set(diagnoses)
    if "id_severe" in present:
        return "id-severe"
    # Unspecified ID is treated as moderate (the safer band)
    if "id_moderate" in present or "id_unspecified" in present:
        return "id-moderate"
    if "asd" in present:
        return "asd"
    if present & ADHD_DIAGNOSES:
        return "adhd"
    if "id_mild" in present or "borderline_iq" in present:
        return "id-mild"
    return "unknown"


def get_profile(disability_type: str) -> DDAProfile:
    """Profile for a disability type; unrecognized types get the unknown profile."""
    profile = DDA_PROFILES.get(disability_type)
    if profile is None:
        logger.warning(f"No DDA profile for '{disability_type}' - using 'unknown'")
        profile = DDA_PROFILES["unknown"]
    return profile


def apply_profile(config: DDAConfig, profile: Optional[DDAProfile]) -> DDAConfig:
    """Copy of `config` with the profile's target band (unchanged when no profile)."""
    if profile is None:
        return config
    return config.model_copy(
        update={
            "target_accuracy_min": profile.target_accuracy_min,
            "target_accuracy_max": profile.target_accuracy_max,
        }
    )
