"""Deterministic heuristic scoring.

Pure functions with no network dependency. They are the only behavior when no
AI provider is configured, and the safety net when a provider call fails.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Optional

from .models import RoadmapContext

STALE_AFTER_DAYS = 180

_TITLE = re.compile(r"^#\s+.+", re.MULTILINE)
_INSTALL_SECTION = re.compile(r"##\s+(Installation|Install|Setup)", re.IGNORECASE)
_USAGE_SECTION = re.compile(r"##\s+(Usage|Example|Quick\s+Start)", re.IGNORECASE)
_CODE_BLOCK = re.compile(r"```[\s\S]*?```")
_LINK = re.compile(r"\[.+\]\(.+\)")
_BADGE = re.compile(r"!\[.*\]\(.*\)")


def clamp_score(value: float, low: float = 0.0, high: float = 100.0) -> float:
    return max(low, min(high, value))


def score_readme(content: Optional[str]) -> float:
    """Score README content from 0 to 100.

    Length, a top-level title, installation and usage sections, fenced code,
    links, and badges each add a fixed number of points.
    """
    if not content:
        return 0.0

    score = 0

    if len(content) >= 500:
        score += 20
    elif len(content) >= 200:
        score += 10

    if _TITLE.search(content):
        score += 10

    # description
    if len(content) > 100:
        score += 10

    if _INSTALL_SECTION.search(content):
        score += 15

    if _USAGE_SECTION.search(content):
        score += 15

    if _CODE_BLOCK.search(content):
        score += 10

    if _LINK.search(content):
        score += 10

    if _BADGE.search(content):
        score += 10

    return clamp_score(float(score))


def days_since(moment: datetime, now: Optional[datetime] = None) -> int:
    """Whole days elapsed since ``moment``.

    Naive datetimes are compared against naive local time, aware ones against
    UTC.
    """
    if now is None:
        now = datetime.now(timezone.utc) if moment.tzinfo else datetime.now()
    return (now - moment).days


def basic_roadmap(context: RoadmapContext, now: Optional[datetime] = None) -> list[str]:
    """Prioritized modernization steps derived from project facts alone."""
    roadmap: list[str] = []

    if not context.has_tests:
        roadmap.append("Immediate: Add automated testing (e.g. pytest or Jest)")

    if not context.has_ci_cd:
        roadmap.append("Immediate: Set up CI/CD with GitHub Actions")

    if days_since(context.last_update, now) > STALE_AFTER_DAYS:
        roadmap.append("Short-term: Update dependencies to latest versions")

    roadmap.append("Long-term: Implement comprehensive documentation")
    roadmap.append("Long-term: Increase test coverage to 80%+")

    return roadmap
