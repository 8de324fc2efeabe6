"""Shared test fixtures and configuration for NorthStar tests."""
import pytest
from typing import List

from northstar.stages.schemas import AnalysisMode, Profile, ProjectInput, UIPrefs

from tests.helpers import make_pipeline


@pytest.fixture
def goals_ranked() -> List[str]:
    return ["Impact", "Autonomy", "Mastery", "Money", "Health", "Optionality"]


@pytest.fixture
def sample_profile(goals_ranked):
    """Create a sample profile for testing."""
    return Profile(
        name="Asha",
        age=31,
        city="Bengaluru",
        experience_years=8,
        domains=["Climate Tech", "Product"],
        goals_ranked=goals_ranked,
        constraints=["Family nearby"],
        risk_appetite="Balanced",
    )


@pytest.fixture
def quick_input(sample_profile):
    """Project input in Quick mode (3 timelines, 3-year horizon)."""
    return ProjectInput(
        id="proj-123",
        profile=sample_profile,
        decisions=["Join a startup or stay at MNC"],
        horizon_years=3,
    )


@pytest.fixture
def deep_input(sample_profile):
    """Project input in Deep mode (5 timelines, 5-year horizon)."""
    return ProjectInput(
        id="proj-456",
        profile=sample_profile,
        decisions=["Start a company"],
        horizon_years=5,
        ui_prefs=UIPrefs(num_timelines=5, mode=AnalysisMode.DEEP),
    )


@pytest.fixture
def offline_pipeline():
    """Pipeline with no provider credentials configured."""
    return make_pipeline()
