"""
Mini-game catalogue.

Read-only configuration supplied to the adaptive core:
- the 15 cognitive domains, each with exactly one canonical game
- the default domain order (easy wins first, challenging domains last)
- per-age stage sizes and trial counts (DTT-based)
- the DDA parameter definition of every game

All structures are immutable; components receive them by injection.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from pydantic import BaseModel, ConfigDict, Field, model_validator

from manas.adaptive.models import DDAConfig
from manas.core.types import AgeGroup, CognitiveDomain

AGE_GROUPS: tuple[str, ...] = ("3-5", "6-9", "10-15")

# Domain used when a game or domain cannot be resolved
FALLBACK_DOMAIN = "attention"


class AgeRange(BaseModel):
    """Inclusive [min, max] range for one age group."""

    model_config = ConfigDict(frozen=True)

    min: int = Field(ge=0)
    max: int = Field(ge=0)

    @model_validator(mode="after")
    def _ordered(self) -> AgeRange:
        if self.min > self.max:
            raise ValueError(f"range min {self.min} > max {self.max}")
        return self

    @property
    def midpoint(self) -> int:
        """Midpoint rounded half up (10-15 -> 13)."""
        return (self.min + self.max + 1) // 2


class GameDefinition(BaseModel):
    """One mini-game as the adaptive core sees it."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    primary_domain: CognitiveDomain
    secondary_domains: tuple[CognitiveDomain, ...] = ()
    dda: DDAConfig


# =============================================================================
# Domain ordering and mapping
# =============================================================================

# Default order when strengths are unknown:
# processing speed / attention (quick wins) -> memory / reasoning -> social / language
DEFAULT_DOMAIN_ORDER: tuple[str, ...] = (
    "processing_speed",
    "attention",
    "motor_skills",
    "working_memory",
    "visuospatial",
    "memory",
    "perceptual",
    "inhibition",
    "cognitive_flexibility",
    "planning",
    "reasoning",
    "problem_solving",
    "emotion_regulation",
    "social_cognition",
    "language",
)

DOMAIN_TO_GAME: Mapping[str, str] = MappingProxyType({
    "attention": "hikari-catch",
    "inhibition": "matte-stop",
    "working_memory": "oboete-narabete",
    "visuospatial": "katachi-sagashi",
    "cognitive_flexibility": "irokae-switch",
    "processing_speed": "hayawaza-touch",
    "memory": "oboete-match",
    "planning": "tsumitage-tower",
    "reasoning": "pattern-puzzle",
    "problem_solving": "meiro-tanken",
    "perceptual": "kakurenbo-katachi",
    "language": "kotoba-catch",
    "social_cognition": "kimochi-yomitori",
    "emotion_regulation": "kimochi-stop",
    "motor_skills": "touch-de-go",
})

GAME_TO_DOMAIN: Mapping[str, str] = MappingProxyType(
    {game_id: domain for domain, game_id in DOMAIN_TO_GAME.items()}
)


# =============================================================================
# Per-age ranges
# =============================================================================

# Sustained-attention development: games per stage
GAMES_PER_STAGE_BY_AGE: Mapping[str, AgeRange] = MappingProxyType({
    "3-5": AgeRange(min=2, max=3),
    "6-9": AgeRange(min=3, max=5),
    "10-15": AgeRange(min=4, max=6),
})

# Discrete trial training: trials per game within a stage
TRIALS_PER_GAME_BY_AGE: Mapping[str, AgeRange] = MappingProxyType({
    "3-5": AgeRange(min=8, max=10),
    "6-9": AgeRange(min=10, max=15),
    "10-15": AgeRange(min=12, max=20),
})


def game_for_domain(domain: str) -> str | None:
    """Canonical game of a domain, or None for domains outside the catalogue."""
    return DOMAIN_TO_GAME.get(domain)


def domain_for_game(game_id: str) -> str:
    """Domain a game trains; unknown games fall back to FALLBACK_DOMAIN."""
    return GAME_TO_DOMAIN.get(game_id, FALLBACK_DOMAIN)


# =============================================================================
# Game DDA definitions
# =============================================================================


def _numeric(name: str, lo: float, hi: float, step: float, initial: Any, direction: str = "up_is_harder") -> dict:
    return {
        "name": name,
        "kind": "numeric",
        "min": lo,
        "max": hi,
        "step": step,
        "initial": initial,
        "direction": direction,
    }


def _categorical(name: str, levels: list, initial: Any, direction: str = "up_is_harder") -> dict:
    return {"name": name, "kind": "categorical", "levels": levels, "initial": initial, "direction": direction}


_GAME_SPECS: list[dict] = [
    {
        "id": "hikari-catch",
        "name": "Hikari Catch",
        "primary_domain": "attention",
        "secondary_domains": ["processing_speed", "inhibition"],
        "parameters": [
            _numeric("distractor_count", 0, 3, 1, 0),
            _numeric("display_duration_ms", 800, 2000, 200, 2000, "down_is_harder"),
            _categorical("similarity", ["low", "mid", "high"], "low"),
            _categorical("isi_ms", [4000, 2000, 1000], 4000),
        ],
    },
    {
        "id": "matte-stop",
        "name": "Matte Stop",
        "primary_domain": "inhibition",
        "secondary_domains": ["attention", "processing_speed"],
        "parameters": [
            _numeric("nogo_ratio", 0.2, 0.4, 0.05, 0.25),
            _numeric("response_window_ms", 1500, 2500, 200, 2500, "down_is_harder"),
            _categorical("cue_complexity", ["color", "shape", "color_and_shape"], "color"),
            _numeric("ssd_ms", 100, 500, 50, 250),
        ],
    },
    {
        "id": "oboete-narabete",
        "name": "Oboete Narabete",
        "primary_domain": "working_memory",
        "secondary_domains": ["attention", "visuospatial"],
        "parameters": [
            _numeric("sequence_length", 2, 9, 1, 2),
            _numeric("display_speed_ms", 600, 1200, 100, 1000, "down_is_harder"),
            _categorical("grid_size", ["2x2", "3x3", "4x4"], "3x3"),
            _categorical("recall_direction", ["forward", "backward"], "forward"),
        ],
    },
    {
        "id": "katachi-sagashi",
        "name": "Katachi Sagashi",
        "primary_domain": "visuospatial",
        "secondary_domains": ["perceptual"],
        "parameters": [
            _numeric("choice_count", 2, 5, 1, 2),
            _categorical("distractor_similarity", ["low", "mid", "high"], "low"),
            _categorical("rotation_degrees", [0, 45, 90, 135, 180], 0),
            _numeric("mirror_ratio", 0, 0.5, 0.1, 0),
        ],
    },
    {
        "id": "irokae-switch",
        "name": "Irokae Switch",
        "primary_domain": "cognitive_flexibility",
        "secondary_domains": ["inhibition", "working_memory"],
        "parameters": [
            _numeric("switch_frequency", 4, 8, 1, 8, "down_is_harder"),
            _categorical("cue_salience", ["high", "mid", "low"], "high"),
            _numeric("dimensions", 2, 3, 1, 2),
            _categorical("phase", ["pre_switch", "post_switch", "border"], "pre_switch"),
        ],
    },
    {
        "id": "hayawaza-touch",
        "name": "Hayawaza Touch",
        "primary_domain": "processing_speed",
        "secondary_domains": ["attention"],
        "parameters": [
            _categorical("mode", ["srt", "crt"], "srt"),
            _categorical("target_count", [1, 2, 4], 1),
        ],
    },
    {
        "id": "oboete-match",
        "name": "Oboete Match",
        "primary_domain": "memory",
        "secondary_domains": ["working_memory", "visuospatial"],
        "parameters": [
            _categorical("delay_ms", [0, 4000, 8000, 12000], 0),
            _numeric("choice_count", 2, 6, 1, 2),
            _categorical("similarity", ["low", "mid", "high"], "low"),
        ],
    },
    {
        "id": "tsumitage-tower",
        "name": "Tsumitage Tower",
        "primary_domain": "planning",
        "secondary_domains": ["working_memory", "problem_solving"],
        "parameters": [
            _numeric("min_moves", 2, 5, 1, 2),
            _numeric("peg_count", 3, 3, 0, 3),
            _numeric("ball_count", 3, 4, 1, 3),
        ],
    },
    {
        "id": "pattern-puzzle",
        "name": "Pattern Puzzle",
        "primary_domain": "reasoning",
        "secondary_domains": ["visuospatial"],
        "parameters": [
            _categorical("pattern_type", ["repeat", "progression", "rotation", "combination"], "repeat"),
            _numeric("choice_count", 3, 6, 1, 3),
        ],
    },
    {
        "id": "meiro-tanken",
        "name": "Meiro Tanken",
        "primary_domain": "problem_solving",
        "secondary_domains": ["planning", "visuospatial"],
        "parameters": [
            _categorical("maze_size", [3, 5, 7], 3),
            _numeric("dead_ends", 0, 4, 1, 0),
        ],
    },
    {
        "id": "kakurenbo-katachi",
        "name": "Kakurenbo Katachi",
        "primary_domain": "perceptual",
        "secondary_domains": ["visuospatial", "attention"],
        "parameters": [
            _numeric("distractor_count", 3, 8, 1, 3),
            _categorical("target_size", ["large", "medium", "small"], "large"),
            _categorical("color_similarity", ["low", "mid", "high"], "low"),
        ],
    },
    {
        "id": "kotoba-catch",
        "name": "Kotoba Catch",
        "primary_domain": "language",
        "secondary_domains": ["memory"],
        "parameters": [
            _categorical("word_category", ["basic_noun", "verb", "adjective", "abstract"], "basic_noun"),
            _numeric("choice_count", 2, 4, 1, 2),
        ],
    },
    {
        "id": "kimochi-yomitori",
        "name": "Kimochi Yomitori",
        "primary_domain": "social_cognition",
        "secondary_domains": ["perceptual"],
        "parameters": [
            _categorical("emotion_clarity", ["exaggerated", "clear", "subtle"], "exaggerated"),
            _numeric("choice_count", 2, 4, 1, 2),
            _categorical("emotion_distance", ["far", "mid", "close"], "far"),
        ],
    },
    {
        "id": "kimochi-stop",
        "name": "Kimochi Stop",
        "primary_domain": "emotion_regulation",
        "secondary_domains": ["inhibition", "social_cognition"],
        "parameters": [
            _numeric("display_duration_ms", 800, 2000, 200, 2000, "down_is_harder"),
            _numeric("block_switch_freq", 4, 8, 1, 8, "down_is_harder"),
        ],
    },
    {
        "id": "touch-de-go",
        "name": "Touch de Go",
        "primary_domain": "motor_skills",
        "secondary_domains": ["processing_speed"],
        "parameters": [
            _numeric("target_size_px", 40, 100, 10, 100, "down_is_harder"),
            _numeric("time_limit_ms", 1500, 4000, 500, 4000, "down_is_harder"),
        ],
    },
]


def _build_catalogue(specs: list[dict]) -> Mapping[str, GameDefinition]:
    games = {}
    for spec in specs:
        games[spec["id"]] = GameDefinition(
            id=spec["id"],
            name=spec["name"],
            primary_domain=spec["primary_domain"],
            secondary_domains=spec["secondary_domains"],
            dda=DDAConfig(parameters=spec["parameters"]),
        )
    return MappingProxyType(games)


GAME_CATALOGUE: Mapping[str, GameDefinition] = _build_catalogue(_GAME_SPECS)


def get_game(game_id: str) -> GameDefinition:
    """Look up a game definition; raises KeyError for unknown ids."""
    try:
        return GAME_CATALOGUE[game_id]
    except KeyError:
        raise KeyError(f"Unknown game '{game_id}'") from None


def age_range(table: Mapping[str, AgeRange], age_group: AgeGroup | str) -> AgeRange:
    """Look up an age group's range; unknown groups are a caller error."""
    try:
        return table[age_group]
    except KeyError:
        raise ValueError(f"Unknown age group '{age_group}' (expected one of {AGE_GROUPS})") from None
