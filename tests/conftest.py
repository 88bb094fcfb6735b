"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from kidlearn.adaptive.models import (  # noqa: E402
    Activity,
    ActivityCategory,
    AdaptiveContext,
    DifficultyLevel,
    PerformanceSignal,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def make_context():
    """Build an AdaptiveContext with a single (optional) latest signal."""

    def _make(
        current=DifficultyLevel.INTERMEDIATE,
        signal=None,
        category=ActivityCategory.SOCIAL_SKILLS,
        **kwargs,
    ):
        performance = kwargs.pop("recent_performance", None)
        if performance is None:
            performance = [PerformanceSignal(**signal)] if signal is not None else []
        return AdaptiveContext(
            child_id=kwargs.pop("child_id", "child-001"),
            target_category=category,
            current_difficulty=current,
            recent_performance=performance,
            **kwargs,
        )

    return _make


@pytest.fixture
def sample_context(make_context):
    """Provide a sample context with a plateau-band signal."""
    return make_context(
        current=DifficultyLevel.INTERMEDIATE,
        signal={"success_rate": 0.72, "attempts_count": 3, "emotional_state": "calm"},
        current_activity_id="emotions-dnd",
    )


@pytest.fixture
def sample_activities():
    """Provide a small activity catalog."""
    return [
        Activity(id="greetings", category=ActivityCategory.SOCIAL_SKILLS, difficulty=DifficultyLevel.ADVANCED),
        Activity(id="counting", category=ActivityCategory.ACADEMIC, difficulty=DifficultyLevel.BEGINNER),
        Activity(id="emotions-dnd", category=ActivityCategory.SOCIAL_SKILLS, difficulty=DifficultyLevel.INTERMEDIATE),
        Activity(id="turn-taking", category=ActivityCategory.SOCIAL_SKILLS, difficulty=DifficultyLevel.BEGINNER),
    ]
