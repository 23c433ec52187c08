"""
Dynamic Difficulty Adjustment.

Provides:
- DifficultyController: per-session staircase
- BiometricSafetyPolicy: sustained-overload safety trigger
- DDA_PROFILES: per-child target accuracy bands
- simulate_session: deterministic virtual-player runs
"""

from manas.adaptive.biometric import BiometricPolicyConfig, BiometricSafetyPolicy
from manas.adaptive.difficulty_controller import DifficultyController
from manas.adaptive.models import (
    AdaptiveChangeEvent,
    BiometricSignal,
    ControllerState,
    DDAConfig,
    DifficultyParameter,
)
from manas.adaptive.profiles import (
    DDA_PROFILES,
    DDAProfile,
    apply_profile,
    derive_disability_type,
    get_profile,
)
from manas.adaptive.simulation import SimulationResult, VirtualPlayer, simulate_session

__all__ = [
    "AdaptiveChangeEvent",
    "BiometricPolicyConfig",
    "BiometricSafetyPolicy",
    "BiometricSignal",
    "ControllerState",
    "DDAConfig",
    "DDAProfile",
    "DDA_PROFILES",
    "DifficultyController",
    "DifficultyParameter",
    "SimulationResult",
    "VirtualPlayer",
    "apply_profile",
    "derive_disability_type",
    "get_profile",
    "simulate_session",
]
