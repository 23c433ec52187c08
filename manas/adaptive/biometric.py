"""
Biometric Safety Policy.

The camera pipeline aggregates pupil / heart-rate samples into one
BiometricSignal per window. The controller treats the signal as a soft
modifier: a single spike changes nothing, but sustained overload
(N consecutive windows) is handled like any other safety trigger and forces
one difficulty reduction.
"""

from __future__ import annotations

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from config import get_settings
from manas.adaptive.models import BiometricSignal


class BiometricPolicyConfig(BaseModel):
    """Thresholds for treating biometric load as a safety condition."""

    model_config = ConfigDict(frozen=True)

    high_load_threshold: float = Field(
        default_factory=lambda: get_settings().biometric_high_load_threshold, ge=0.0, le=100.0
    )
    low_attention_threshold: float | None = Field(
        default_factory=lambda: get_settings().biometric_low_attention_threshold
    )
    consecutive_windows: int = Field(
        default_factory=lambda: get_settings().biometric_consecutive_windows, ge=1
    )


class BiometricSafetyPolicy:
    """Counts consecutive overloaded windows and trips once per streak."""

    def __init__(self, config: BiometricPolicyConfig | None = None):
        self.config = config or BiometricPolicyConfig()
        self._streak = 0

    @property
    def streak(self) -> int:
        return self._streak

    def is_overloaded(self, signal: BiometricSignal) -> bool | None:
        """
        Classify one window.

        Returns None when the signal carries nothing the policy looks at,
        so that gaps in the camera feed neither extend nor break a streak.
        """
        checks: list[bool] = []
        if signal.cognitive_load is not None:
            checks.append(signal.cognitive_load >= self.config.high_load_threshold)
        if self.config.low_attention_threshold is not None and signal.attention_score is not None:
            checks.append(signal.attention_score <= self.config.low_attention_threshold)
        if not checks:
            return None
        return any(checks)

    def observe(self, signal: BiometricSignal) -> bool:
        """Feed one window; True when a forced reduction is due."""
        overloaded = self.is_overloaded(signal)
        if overloaded is None:
            return False

        if not overloaded:
            self._streak = 0
            return False

        self._streak += 1
        if self._streak >= self.config.consecutive_windows:
            logger.info(
                f"Sustained biometric overload for {self._streak} windows "
                f"(load={signal.cognitive_load}, attention={signal.attention_score})"
            )
            self._streak = 0
            return True
        return False

    def reset(self) -> None:
        self._streak = 0
