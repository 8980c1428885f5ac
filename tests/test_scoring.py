"""Tests for the heuristic scorer."""

from datetime import datetime, timedelta, timezone

from repo_quality.core.models import RoadmapContext
from repo_quality.core.scoring import basic_roadmap, clamp_score, days_since, score_readme

FULL_README = (
    "# Project\n\n"
    "[![build](https://img.shields.io/badge/build-passing-green.svg)](https://ci.example.com)\n\n"
    + "A thorough description of what this project does and why. " * 10
    + "\n\n## Installation\n\n```\npip install project\n```\n\n"
    "## Usage\n\nRead the [guide](https://example.com).\n"
)


def test_empty_readme_scores_zero():
    assert score_readme(None) == 0
    assert score_readme("") == 0


def test_short_plain_readme():
    # under 100 chars, no structure
    assert score_readme("just some words") == 0


def test_title_only():
    assert score_readme("# Title") == 10


def test_medium_length_with_description():
    content = "x" * 250
    assert score_readme(content) == 20


def test_full_readme_is_capped_at_100():
    assert len(FULL_README) >= 500
    assert score_readme(FULL_README) == 100


def test_section_headings_are_case_insensitive():
    base = "y" * 50
    assert score_readme(base + "\n## setup\n") == 15
    assert score_readme(base + "\n## quick start\n") == 15


def test_clamp_score():
    assert clamp_score(-5) == 0
    assert clamp_score(105) == 100
    assert clamp_score(42.5) == 42.5


def test_days_since_naive_and_aware():
    now = datetime(2024, 6, 1, 12, 0)
    assert days_since(datetime(2024, 5, 1, 12, 0), now) == 31
    assert days_since(datetime.now(timezone.utc) - timedelta(days=3, hours=1)) == 3


def test_basic_roadmap_order():
    now = datetime(2024, 6, 1)
    context = RoadmapContext(
        technologies=["javascript"],
        last_update=now - timedelta(days=181),
        has_tests=False,
        has_ci_cd=False,
    )
    roadmap = basic_roadmap(context, now)
    assert [step.split(":")[0] for step in roadmap] == [
        "Immediate",
        "Immediate",
        "Short-term",
        "Long-term",
        "Long-term",
    ]
    assert "testing" in roadmap[0]
    assert "CI/CD" in roadmap[1]
    assert "dependencies" in roadmap[2]


def test_basic_roadmap_threshold_is_exclusive():
    now = datetime(2024, 6, 1)
    context = RoadmapContext(last_update=now - timedelta(days=180), has_tests=True, has_ci_cd=True)
    assert basic_roadmap(context, now) == [
        "Long-term: Implement comprehensive documentation",
        "Long-term: Increase test coverage to 80%+",
    ]
