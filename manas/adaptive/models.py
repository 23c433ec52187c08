"""
Adaptive Difficulty Models.

Configuration (immutable, validated once when the game catalogue is loaded):
- DifficultyParameter: one tunable knob of a mini-game
- DDAConfig: target band, window, cooldown and the ordered parameters

Runtime:
- ControllerState: ephemeral per-session staircase state
- AdaptiveChangeEvent: explainable record of a single parameter change
- BiometricSignal: auxiliary load/attention estimate from the camera pipeline
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from config import get_settings
from manas.core.types import (
    ChangeDirection,
    ChangeReason,
    DifficultyDirection,
    ParameterKind,
    ParamValue,
)

# Decimal places kept for numeric parameters (absorbs drift from 0.05-style steps)
NUMERIC_PRECISION = 6


# =============================================================================
# Configuration
# =============================================================================


class DifficultyParameter(BaseModel):
    """
    A single difficulty parameter of a mini-game.

    Numeric parameters move by `step` inside [min, max]; categorical
    parameters move one index along `levels`. `direction` declares whether
    moving up (larger value / later level) makes the task harder.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    kind: ParameterKind
    min: float | None = None
    max: float | None = None
    step: float = Field(default=1, ge=0)
    levels: tuple[ParamValue, ...] = ()
    initial: ParamValue
    direction: DifficultyDirection = DifficultyDirection.UP_IS_HARDER

    @model_validator(mode="after")
    def _check_shape(self) -> DifficultyParameter:
        if self.kind == ParameterKind.NUMERIC:
            if self.min is None or self.max is None:
                raise ValueError(f"numeric parameter '{self.name}' needs min and max")
            if self.min > self.max:
                raise ValueError(f"parameter '{self.name}': min {self.min} > max {self.max}")
            if isinstance(self.initial, str):
                raise ValueError(f"numeric parameter '{self.name}' has non-numeric initial")
            if not self.min <= self.initial <= self.max:
                raise ValueError(
                    f"parameter '{self.name}': initial {self.initial} outside [{self.min}, {self.max}]"
                )
        else:
            if not self.levels:
                raise ValueError(f"categorical parameter '{self.name}' needs levels")
            if self.initial not in self.levels:
                raise ValueError(
                    f"parameter '{self.name}': initial {self.initial!r} is not one of its levels"
                )
        return self

    def _moves_up(self, harder: bool) -> bool:
        """Should the raw value / level index increase for the intended effect?"""
        return harder == (self.direction == DifficultyDirection.UP_IS_HARDER)

    def next_value(self, current: ParamValue, harder: bool) -> ParamValue | None:
        """
        Value one step harder (or easier) than `current`.

        Returns None when the move is clamped at a bound, i.e. nothing would
        change. Never raises.
        """
        up = self._moves_up(harder)

        if self.kind == ParameterKind.CATEGORICAL:
            if current not in self.levels:
                return None
            index = self.levels.index(current) + (1 if up else -1)
            if index < 0 or index >= len(self.levels):
                return None
            return self.levels[index]

        if isinstance(current, str):
            return None
        raw = current + self.step if up else current - self.step
        clamped = min(max(raw, self.min), self.max)
        new_value = round(clamped, NUMERIC_PRECISION)
        if isinstance(current, int) and float(new_value).is_integer():
            new_value = int(new_value)
        if new_value == current:
            return None
        return new_value

    def hardness(self, value: ParamValue) -> float:
        """Position of `value` between easiest (0.0) and hardest (1.0)."""
        if self.kind == ParameterKind.CATEGORICAL:
            if value not in self.levels or len(self.levels) == 1:
                return 0.0
            position = self.levels.index(value) / (len(self.levels) - 1)
        else:
            span = self.max - self.min
            if span == 0 or isinstance(value, str):
                return 0.0
            position = (value - self.min) / span

        if self.direction == DifficultyDirection.DOWN_IS_HARDER:
            position = 1.0 - position
        return position


class DDAConfig(BaseModel):
    """Per-game DDA configuration (immutable)."""

    model_config = ConfigDict(frozen=True)

    target_accuracy_min: float = Field(
        default_factory=lambda: get_settings().dda_target_accuracy_min, ge=0.0, le=1.0
    )
    target_accuracy_max: float = Field(
        default_factory=lambda: get_settings().dda_target_accuracy_max, ge=0.0, le=1.0
    )
    window_size: int = Field(default_factory=lambda: get_settings().dda_window_size, ge=1)
    min_trials_before_adjust: int = Field(
        default_factory=lambda: get_settings().dda_min_trials_before_adjust, ge=0
    )
    parameters: tuple[DifficultyParameter, ...] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_band(self) -> DDAConfig:
        if self.target_accuracy_min > self.target_accuracy_max:
            raise ValueError("target_accuracy_min must not exceed target_accuracy_max")
        names = [p.name for p in self.parameters]
        if len(names) != len(set(names)):
            raise ValueError(f"duplicate parameter names in {names}")
        return self

    def initial_params(self) -> dict[str, ParamValue]:
        """Initial value of every parameter, in declared order."""
        return {p.name: p.initial for p in self.parameters}


# =============================================================================
# Runtime
# =============================================================================


@dataclass(frozen=True)
class AdaptiveChangeEvent:
    """One parameter change, with enough context to explain it."""

    parameter_name: str
    old_value: ParamValue
    new_value: ParamValue
    direction_of_difficulty: ChangeDirection
    reason: ChangeReason
    trigger_accuracy: float
    trigger_window: int

    def to_dict(self) -> dict[str, Any]:
        """Flat dict for the external event logger."""
        return {
            "parameter": self.parameter_name,
            "old_value": self.old_value,
            "new_value": self.new_value,
            "direction": self.direction_of_difficulty.value,
            "reason": self.reason.value,
            "trigger_accuracy": self.trigger_accuracy,
            "trigger_window": self.trigger_window,
        }


@dataclass
class ControllerState:
    """Ephemeral staircase state for one active session."""

    params: dict[str, ParamValue]
    window: deque[bool]
    trials_since_last_adjustment: int = 0
    trial_count: int = 0
    last_advanced_index: int | None = None
    # Indices of parameters made harder, most recent last (undo stack for retreats)
    advanced_stack: list[int] = field(default_factory=list)

    @classmethod
    def initial(cls, config: DDAConfig) -> ControllerState:
        return cls(params=config.initial_params(), window=deque(maxlen=config.window_size))

    @property
    def window_accuracy(self) -> float:
        if not self.window:
            return 0.0
        return sum(self.window) / len(self.window)


class BiometricSignal(BaseModel):
    """Aggregated biometric estimate for one window (each score 0-100)."""

    model_config = ConfigDict(frozen=True)

    attention_score: float | None = Field(default=None, ge=0.0, le=100.0)
    cognitive_load: float | None = Field(default=None, ge=0.0, le=100.0)
    arousal_level: float | None = Field(default=None, ge=0.0, le=100.0)
