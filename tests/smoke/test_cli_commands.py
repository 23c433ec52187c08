"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


def run_cli_command(args: list[str], timeout: int = 30) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        args: Arguments after 'python -m manas.cli.main'
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    # Wide terminal so rich tables don't wrap ids
    env = dict(os.environ, COLUMNS="200")

    result = subprocess.run(
        [sys.executable, "-m", "manas.cli.main", *args],
        cwd=PROJECT_ROOT,
        capture_output=True,
        text=True,
        timeout=timeout,
        env=env,
    )

    return result.returncode, result.stdout, result.stderr


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self):
        code, stdout, stderr = run_cli_command(["--help"])

        assert code == 0, f"Help failed: {stderr}"
        assert "simulate" in stdout
        assert "stage" in stdout

    def test_simulate_help(self):
        code, stdout, stderr = run_cli_command(["simulate", "--help"])

        assert code == 0, f"Simulate help failed: {stderr}"


class TestCLIGames:
    def test_games_lists_catalogue(self):
        code, stdout, stderr = run_cli_command(["games"])

        assert code == 0, f"Games failed: {stderr}"
        assert "hikari-catch" in stdout
        assert "touch-de-go" in stdout


class TestCLISimulate:
    def test_simulate_runs(self):
        code, stdout, stderr = run_cli_command(["simulate", "hikari-catch", "--trials", "60"])

        assert code == 0, f"Simulate failed: {stderr}"
        assert "Overall accuracy" in stdout

    def test_simulate_with_profile(self):
        code, stdout, stderr = run_cli_command(
            ["simulate", "matte-stop", "--profile", "asd", "--trials", "30"]
        )

        assert code == 0, f"Simulate failed: {stderr}"
        assert "Target band: 80%-90% (profile: asd)" in stdout

    def test_simulate_profile_from_diagnosis(self):
        code, stdout, stderr = run_cli_command(
            ["simulate", "matte-stop", "--diagnosis", "adhd_combined", "--diagnosis", "id_mild", "--trials", "30"]
        )

        assert code == 0, f"Simulate failed: {stderr}"
        assert "(profile: adhd)" in stdout

    def test_unknown_profile_rejected(self):
        code, stdout, stderr = run_cli_command(["simulate", "matte-stop", "--profile", "bogus"])

        assert code != 0

    def test_unknown_game_rejected(self):
        code, stdout, stderr = run_cli_command(["simulate", "no-such-game"])

        assert code != 0


class TestCLIStageAndReview:
    """Stage preview and review listing over a JSON snapshot."""

    def test_stage_without_state(self):
        code, stdout, stderr = run_cli_command(["stage", "--age-group", "3-5"])

        assert code == 0, f"Stage failed: {stderr}"
        assert "hayawaza-touch" in stdout

    def test_invalid_age_group(self):
        code, stdout, stderr = run_cli_command(["stage", "--age-group", "7-8"])

        assert code != 0

    def test_record_then_stage_and_review(self, tmp_path):
        state = tmp_path / "child.json"

        code, stdout, stderr = run_cli_command(
            ["record", "language", "kotoba-catch", "0.9", "--state", str(state)]
        )
        assert code == 0, f"Record failed: {stderr}"
        records = json.loads(state.read_text(encoding="utf-8"))
        assert [r["domain"] for r in records] == ["language"]

        code, stdout, stderr = run_cli_command(["stage", "--state", str(state)])
        assert code == 0, f"Stage failed: {stderr}"
        assert "kotoba-catch" in stdout

        code, stdout, stderr = run_cli_command(["review", "--state", str(state)])
        assert code == 0, f"Review failed: {stderr}"
        assert "No domains due for review" in stdout

    def test_corrupt_state_rejected(self, tmp_path):
        state = tmp_path / "child.json"
        state.write_text("{not json", encoding="utf-8")

        code, stdout, stderr = run_cli_command(["review", "--state", str(state)])

        assert code != 0
