"""
Typer CLI for the Manas adaptive core (developer tooling).

Commands:
    manas simulate GAME_ID    - Drive a controller with a virtual player
    manas stage               - Preview the games of a stage
    manas review              - List domains due for review
    manas record              - Record a session into a JSON snapshot
    manas games               - List the game catalogue

Usage:
    manas simulate hikari-catch --ability 0.9 --trials 200
    manas simulate matte-stop --profile asd
    manas simulate matte-stop --diagnosis adhd_combined --diagnosis id_mild
    manas stage --age-group 6-9 --stage 2 --state child.json
    manas record attention hikari-catch 0.85 --state child.json
    manas review --state child.json
"""

from __future__ import annotations

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from config import get_settings
from manas.adaptive.profiles import DDA_PROFILES, apply_profile, derive_disability_type
from manas.adaptive.simulation import simulate_session
from manas.core.catalogue import AGE_GROUPS, DOMAIN_TO_GAME, GAME_CATALOGUE, get_game
from manas.learning.mastery_tracker import MasteryTracker
from manas.study.stage_schedule import StageScheduleGenerator

app = typer.Typer(
    help="Manas adaptive core: difficulty control, mastery tracking, stage scheduling",
    no_args_is_help=True,
)

console = Console()


# ========================================
# Snapshot helpers
# ========================================


def _load_tracker(state: Optional[Path]) -> MasteryTracker:
    """Build a tracker, restoring it from a JSON snapshot when one exists."""
    tracker = MasteryTracker()
    if state is None or not state.exists():
        return tracker

    try:
        records = json.loads(state.read_text(encoding="utf-8"))
        tracker.restore(records)
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        raise typer.BadParameter(f"Unreadable state file {state}: {e}") from e
    return tracker


def _save_tracker(tracker: MasteryTracker, state: Path) -> None:
    state.write_text(json.dumps(tracker.serialize(), indent=2), encoding="utf-8")


def _check_age_group(age_group: str) -> str:
    if age_group not in AGE_GROUPS:
        raise typer.BadParameter(f"expected one of {', '.join(AGE_GROUPS)}")
    return age_group


# ========================================
# Commands
# ========================================


@app.command("simulate")
def simulate(
    game_id: str = typer.Argument(..., help="Game to simulate (see `manas games`)"),
    ability: float = typer.Option(0.9, "--ability", min=0.0, max=1.0, help="Success rate at the easiest settings"),
    trials: int = typer.Option(100, "--trials", min=1, help="Number of trials"),
    penalty: float = typer.Option(0.15, "--penalty", min=0.0, help="Ability lost per fully hardened parameter"),
    profile: Optional[str] = typer.Option(None, "--profile", help=f"DDA profile ({', '.join(DDA_PROFILES)})"),
    diagnosis: Optional[list[str]] = typer.Option(
        None, "--diagnosis", help="Onboarding diagnosis (repeatable); derives the profile"
    ),
) -> None:
    """Run a deterministic virtual player against a game's controller."""
    try:
        game = get_game(game_id)
    except KeyError:
        raise typer.BadParameter(f"unknown game '{game_id}'", param_hint="GAME_ID") from None

    if profile is not None and profile not in DDA_PROFILES:
        raise typer.BadParameter(f"expected one of {', '.join(DDA_PROFILES)}", param_hint="--profile")
    if profile is None and diagnosis:
        profile = derive_disability_type(diagnosis)

    config = apply_profile(game.dda, DDA_PROFILES[profile] if profile else None)
    result = simulate_session(config, ability, trials, penalty_per_parameter=penalty)

    table = Table(title=f"Adaptive changes: {game.name}")
    table.add_column("Trial", justify="right")
    table.add_column("Parameter", style="cyan")
    table.add_column("Change")
    table.add_column("Reason", style="dim")
    table.add_column("Accuracy", justify="right")

    for trial, event in result.events:
        table.add_row(
            str(trial),
            event.parameter_name,
            f"{event.old_value} -> {event.new_value}",
            event.reason.value,
            f"{event.trigger_accuracy:.0%}",
        )

    console.print(table)
    rprint(
        f"Target band: {config.target_accuracy_min:.0%}-{config.target_accuracy_max:.0%}"
        + (f" (profile: {profile})" if profile else "")
    )
    rprint(f"Changes: {len(result.events)}")
    rprint(f"Overall accuracy: {result.accuracy():.1%}")
    rprint(f"Final params: {result.final_params}")


@app.command("stage")
def stage(
    age_group: str = typer.Option("6-9", "--age-group", "-a", callback=_check_age_group, help="3-5, 6-9 or 10-15"),
    stage_number: int = typer.Option(1, "--stage", "-s", min=1, help="Stage number"),
    state: Optional[Path] = typer.Option(None, "--state", help="JSON mastery snapshot"),
) -> None:
    """Preview the game list of a stage."""
    tracker = _load_tracker(state)
    stage_games = StageScheduleGenerator(tracker).generate_stage_games(
        age_group, stage_number, now=datetime.now(timezone.utc)
    )

    table = Table(title=f"Stage {stage_number} ({age_group})")
    table.add_column("#", justify="right")
    table.add_column("Game", style="cyan")
    table.add_column("Domain")
    table.add_column("Trials", justify="right")
    table.add_column("Review")

    for i, game in enumerate(stage_games, 1):
        table.add_row(
            str(i),
            game.game_id,
            game.domain,
            str(game.trial_count),
            "[yellow]yes[/yellow]" if game.is_review else "",
        )

    console.print(table)


@app.command("review")
def review(
    state: Optional[Path] = typer.Option(None, "--state", help="JSON mastery snapshot"),
) -> None:
    """List domains whose recall fell below the review threshold."""
    tracker = _load_tracker(state)
    domains = tracker.get_domains_needing_review(datetime.now(timezone.utc))

    if not domains:
        rprint("[green]No domains due for review[/green]")
        return

    for domain in domains:
        rprint(f"  {domain} ({DOMAIN_TO_GAME.get(domain, '?')})")


@app.command("record")
def record(
    domain: str = typer.Argument(..., help="Cognitive domain"),
    game_id: str = typer.Argument(..., help="Game played"),
    accuracy: float = typer.Argument(..., min=0.0, max=1.0, help="Session accuracy (0-1)"),
    state: Path = typer.Option(..., "--state", help="JSON mastery snapshot (created if missing)"),
) -> None:
    """Record one completed session and save the snapshot."""
    tracker = _load_tracker(state)
    outcome = tracker.record_session_result(domain, game_id, accuracy)
    _save_tracker(tracker, state)

    rprint(f"Level: {outcome.new_level}" + (" [green](level up)[/green]" if outcome.level_changed else ""))
    if outcome.regression:
        rprint("[red]Regression detected[/red]")


@app.command("games")
def games() -> None:
    """List the game catalogue."""
    table = Table(title=f"Games ({len(GAME_CATALOGUE)})")
    table.add_column("ID", style="cyan")
    table.add_column("Domain")
    table.add_column("Parameters", style="dim")

    for game in GAME_CATALOGUE.values():
        table.add_row(game.id, game.primary_domain, ", ".join(p.name for p in game.dda.parameters))

    console.print(table)


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=get_settings().log_level,
        format="<level>{message}</level>",
    )

    app()


if __name__ == "__main__":
    main()
