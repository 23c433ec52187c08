"""
Difficulty Controller - per-trial staircase.

Keeps a child's windowed accuracy inside the target band (70-85% by
default, the zone of proximal development) by moving one parameter one
step at a time:

- Above the band: the next parameter in declared order gets harder
  (round-robin cursor, saturated parameters skipped)
- Below the band: the most recently hardened parameter is undone first;
  only then does an untouched parameter get easier
- A hard cooldown (min_trials_before_adjust) separates organic changes

The outcome window keeps sliding across changes so every decision reflects
the most recent behavior. Safety triggers (frustration monitor, sustained
biometric overload) bypass the cooldown.
"""

from __future__ import annotations

from typing import Any, Mapping

from loguru import logger

from manas.adaptive.biometric import BiometricSafetyPolicy
from manas.adaptive.models import (
    AdaptiveChangeEvent,
    BiometricSignal,
    ControllerState,
    DDAConfig,
)
from manas.core.types import ChangeDirection, ChangeReason, ParamValue


class DifficultyController:
    """
    Staircase controller for one active game session.

    Lifecycle: reset(config) on session start, record_trial_result() after
    every trial, end_session() when the session layer ends it. Calls made
    outside a session are no-ops.
    """

    def __init__(
        self,
        config: DDAConfig | None = None,
        biometric_policy: BiometricSafetyPolicy | None = None,
    ):
        """
        Args:
            config: Game DDA config; when given, a session starts immediately
            biometric_policy: Policy deciding when biometric load forces a reduction
        """
        self._config: DDAConfig | None = None
        self._state: ControllerState | None = None
        self.biometric_policy = biometric_policy or BiometricSafetyPolicy()
        if config is not None:
            self.reset(config)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def config(self) -> DDAConfig | None:
        return self._config

    @property
    def is_active(self) -> bool:
        return self._state is not None

    @property
    def trial_count(self) -> int:
        return self._state.trial_count if self._state else 0

    @property
    def trials_since_last_adjustment(self) -> int:
        return self._state.trials_since_last_adjustment if self._state else 0

    def reset(self, config: DDAConfig | None = None) -> None:
        """Start a fresh session: initial values, empty window, zeroed counters."""
        config = config or self._config
        if config is None:
            logger.debug("reset() without a DDA config - ignored")
            return

        self._config = config
        self._state = ControllerState.initial(config)
        self.biometric_policy.reset()

    def end_session(self) -> None:
        """Discard the ephemeral session state (partial windows are never kept)."""
        self._state = None
        self.biometric_policy.reset()

    # =========================================================================
    # Queries
    # =========================================================================

    def get_current_params(self) -> dict[str, ParamValue]:
        """Current value of every parameter (a copy)."""
        if self._state is None:
            return {}
        return dict(self._state.params)

    def get_current_accuracy(self) -> float:
        """Accuracy over the trials currently in the window."""
        if self._state is None:
            return 0.0
        return self._state.window_accuracy

    # =========================================================================
    # Inputs
    # =========================================================================

    def record_trial_result(self, is_correct: bool) -> AdaptiveChangeEvent | None:
        """
        Record one trial outcome and adjust difficulty if warranted.

        Returns:
            The change made, or None (window not full, cooldown active,
            accuracy in band, or every candidate parameter saturated)
        """
        state = self._state
        if state is None:
            logger.debug("record_trial_result() with no active session - ignored")
            return None

        state.window.append(bool(is_correct))
        state.trials_since_last_adjustment += 1
        state.trial_count += 1

        config = self._config
        if len(state.window) < config.window_size:
            return None
        if state.trials_since_last_adjustment < config.min_trials_before_adjust:
            return None

        accuracy = state.window_accuracy
        if accuracy > config.target_accuracy_max:
            return self._make_harder(accuracy, ChangeReason.ACCURACY_HIGH)
        if accuracy < config.target_accuracy_min:
            return self._make_easier(accuracy, ChangeReason.ACCURACY_LOW)
        return None

    def force_reduce_difficulty(self) -> AdaptiveChangeEvent | None:
        """One-step reduction that bypasses the cooldown (safety monitors only)."""
        if self._state is None:
            logger.debug("force_reduce_difficulty() with no active session - ignored")
            return None
        return self._make_easier(self._state.window_accuracy, ChangeReason.SAFETY_OVERRIDE)

    def record_biometric_input(
        self, signal: BiometricSignal | Mapping[str, Any]
    ) -> AdaptiveChangeEvent | None:
        """
        Feed one aggregated biometric window.

        Sustained overload (per the biometric policy) forces one reduction.
        """
        if self._state is None:
            return None
        if not isinstance(signal, BiometricSignal):
            signal = BiometricSignal.model_validate(signal)

        if self.biometric_policy.observe(signal):
            return self.force_reduce_difficulty()
        return None

    # =========================================================================
    # Staircase steps
    # =========================================================================

    def _make_harder(self, accuracy: float, reason: ChangeReason) -> AdaptiveChangeEvent | None:
        state = self._state
        parameters = self._config.parameters
        count = len(parameters)
        start = 0 if state.last_advanced_index is None else (state.last_advanced_index + 1) % count

        for offset in range(count):
            index = (start + offset) % count
            new_value = parameters[index].next_value(state.params[parameters[index].name], harder=True)
            if new_value is None:
                continue
            state.last_advanced_index = index
            state.advanced_stack.append(index)
            return self._apply(index, new_value, ChangeDirection.INCREASED, accuracy, reason)

        logger.debug(f"All parameters at their hardest (accuracy={accuracy:.2f})")
        return None

    def _make_easier(self, accuracy: float, reason: ChangeReason) -> AdaptiveChangeEvent | None:
        state = self._state
        parameters = self._config.parameters

        # Undo the most recent increase that can still be undone
        for position in range(len(state.advanced_stack) - 1, -1, -1):
            index = state.advanced_stack[position]
            new_value = parameters[index].next_value(state.params[parameters[index].name], harder=False)
            del state.advanced_stack[position]
            if new_value is not None:
                return self._apply(index, new_value, ChangeDirection.DECREASED, accuracy, reason)

        for index, parameter in enumerate(parameters):
            new_value = parameter.next_value(state.params[parameter.name], harder=False)
            if new_value is not None:
                return self._apply(index, new_value, ChangeDirection.DECREASED, accuracy, reason)

        logger.debug(f"All parameters at their easiest (accuracy={accuracy:.2f})")
        return None

    def _apply(
        self,
        index: int,
        new_value: ParamValue,
        direction: ChangeDirection,
        accuracy: float,
        reason: ChangeReason,
    ) -> AdaptiveChangeEvent:
        state = self._state
        name = self._config.parameters[index].name
        old_value = state.params[name]

        state.params[name] = new_value
        state.trials_since_last_adjustment = 0

        event = AdaptiveChangeEvent(
            parameter_name=name,
            old_value=old_value,
            new_value=new_value,
            direction_of_difficulty=direction,
            reason=reason,
            trigger_accuracy=accuracy,
            trigger_window=self._config.window_size,
        )
        logger.info(
            f"Difficulty {direction.value}: {name} {old_value} -> {new_value} "
            f"({reason.value}, accuracy={accuracy:.2f})"
        )
        return event
