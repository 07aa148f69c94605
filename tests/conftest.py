"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from datetime import UTC, datetime
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from facet.core.models import (  # noqa: E402
    Concept,
    Dimension,
    DimensionMastery,
    Variant,
    create_empty_mastery_profile,
)


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (full review loop)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def now():
    """A fixed, timezone-aware review time."""
    return datetime(2024, 1, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def seeded_rng():
    """Reproducible random source."""
    return random.Random(42).random


@pytest.fixture
def neutral_profile():
    """Every dimension at neutral defaults (combined 0.5)."""
    return create_empty_mastery_profile()


@pytest.fixture
def strong_definition_profile():
    """Definition recall mastered, everything else neutral."""
    profile = create_empty_mastery_profile()
    profile[Dimension.DEFINITION_RECALL] = DimensionMastery(accuracy_ewma=1.0, speed_ewma=1.0, recent_count=10)
    return profile


@pytest.fixture
def sample_concept():
    """Provide a sample concept for testing."""
    return Concept(
        id="concept-opportunity-cost",
        name="Opportunity cost",
        definition="The value of the next best alternative given up when making a choice",
    )


@pytest.fixture
def sample_variants(sample_concept):
    """One definition-recall and one scenario variant for the sample concept."""
    return [
        Variant(
            id="v-definition",
            concept_id=sample_concept.id,
            dimension=Dimension.DEFINITION_RECALL,
            difficulty=2,
            front="Define opportunity cost.",
        ),
        Variant(
            id="v-scenario",
            concept_id=sample_concept.id,
            dimension=Dimension.SCENARIO_APPLICATION,
            difficulty=2,
            front="You skip a paid shift to attend a free concert. What did the concert cost?",
        ),
    ]
