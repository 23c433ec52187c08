"""
Virtual player simulation for the difficulty controller.

A virtual player has a fixed ability (success probability at the easiest
settings); every parameter pushed toward its hardest value subtracts up to
`penalty_per_parameter` from it. Outcomes are produced by error diffusion
instead of random draws, so a run is fully deterministic and the observed
accuracy tracks the success probability exactly over time.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from manas.adaptive.difficulty_controller import DifficultyController
from manas.adaptive.models import AdaptiveChangeEvent, DDAConfig
from manas.core.types import ParamValue


@dataclass
class VirtualPlayer:
    """Deterministic synthetic child."""

    ability: float
    penalty_per_parameter: float = 0.15
    _credit: float = field(default=0.0, repr=False)

    def success_probability(self, config: DDAConfig, params: dict[str, ParamValue]) -> float:
        load = sum(
            p.hardness(params[p.name]) * self.penalty_per_parameter for p in config.parameters
        )
        return min(1.0, max(0.0, self.ability - load))

    def respond(self, config: DDAConfig, params: dict[str, ParamValue]) -> bool:
        self._credit += self.success_probability(config, params)
        if self._credit >= 1.0 - 1e-9:
            self._credit -= 1.0
            return True
        return False


@dataclass
class SimulationResult:
    """Outcome of one simulated session."""

    outcomes: list[bool]
    events: list[tuple[int, AdaptiveChangeEvent]]  # (trial number, event)
    final_params: dict[str, ParamValue]

    def accuracy(self, last: int | None = None) -> float:
        window = self.outcomes[-last:] if last else self.outcomes
        if not window:
            return 0.0
        return sum(window) / len(window)

    def rolling_accuracy(self, size: int = 10) -> list[float]:
        return [
            sum(self.outcomes[i - size : i]) / size for i in range(size, len(self.outcomes) + 1)
        ]


def simulate_session(
    config: DDAConfig,
    ability: float,
    trials: int,
    penalty_per_parameter: float = 0.15,
) -> SimulationResult:
    """Drive a fresh controller with a virtual player for `trials` trials."""
    controller = DifficultyController(config)
    player = VirtualPlayer(ability=ability, penalty_per_parameter=penalty_per_parameter)
    outcomes: list[bool] = []
    events: list[tuple[int, AdaptiveChangeEvent]] = []

    for trial in range(1, trials + 1):
        is_correct = player.respond(config, controller.get_current_params())
        outcomes.append(is_correct)
        event = controller.record_trial_result(is_correct)
        if event is not None:
            events.append((trial, event))

    return SimulationResult(
        outcomes=outcomes,
        events=events,
        final_params=controller.get_current_params(),
    )
