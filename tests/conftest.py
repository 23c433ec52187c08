"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from manas.adaptive.models import DDAConfig  # noqa: E402
from manas.learning.mastery_tracker import MasteryTracker  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "simulation: Virtual-player simulations")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "simulation" in str(item.fspath):
            item.add_marker(pytest.mark.simulation)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """Fixed reference time for mastery and review tests."""
    return datetime(2026, 1, 5, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def two_param_config():
    """Small DDA config: one numeric and one categorical parameter."""
    return DDAConfig(
        target_accuracy_min=0.70,
        target_accuracy_max=0.85,
        window_size=5,
        min_trials_before_adjust=3,
        parameters=[
            {"name": "distractors", "kind": "numeric", "min": 0, "max": 3, "step": 1, "initial": 0},
            {"name": "similarity", "kind": "categorical", "levels": ["low", "mid", "high"], "initial": "low"},
        ],
    )


@pytest.fixture
def tracker():
    """Empty mastery tracker with default thresholds."""
    return MasteryTracker()
