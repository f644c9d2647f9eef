"""Shared fixtures for targeting tests."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from inmidst.contexts.targeting import Mask, MaskFilters, NarrativeBlock

FIXTURES_PATH = Path(__file__).parent / "fixtures"

# Clock pinned for recency-dependent tests
NOW = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def analyst_mask():
    return Mask(
        id="analyst",
        name="Analyst",
        filters=MaskFilters(
            include_tags={"analysis", "metrics"},
            exclude_tags=set(),
            priority_weights={"metrics": 2, "impact": 1.5},
        ),
    )


@pytest.fixture
def narrative_blocks():
    return [
        NarrativeBlock(
            title="Data Analysis Project",
            body="Led analysis of performance metrics",
            tags=("analysis", "metrics", "impact"),
        ),
        NarrativeBlock(title="Leadership Initiative", body="Managed team of 5", tags=("leadership", "management")),
        NarrativeBlock(
            title="Technical Architecture",
            body="Designed system with scalability focus",
            tags=("design", "architecture"),
        ),
        NarrativeBlock(title="Quality Assurance", body="Implemented testing framework", tags=("quality", "testing")),
    ]


@pytest.fixture
def fixtures_path():
    return FIXTURES_PATH
