"""README quality for the documentation metric."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from .errors import RepoQualityError
from .scoring import score_readme

if TYPE_CHECKING:
    from .analyzer import AIAnalyzer

logger = logging.getLogger(__name__)


async def readme_quality(readme_content: Optional[str], analyzer: Optional["AIAnalyzer"] = None) -> float:
    """README score from 0 to 100.

    Uses the AI score when the analyzer has a provider, the heuristic score
    otherwise or when the AI call raises. A missing README scores 0.
    """
    if not readme_content:
        return 0.0

    if analyzer is not None and analyzer.is_ai_available():
        try:
            result = await analyzer.analyze_readme(readme_content)
            return result.quality_score
        except RepoQualityError as exc:
            logger.warning("AI README scoring unavailable, using heuristic: %s", exc)

    return score_readme(readme_content)
