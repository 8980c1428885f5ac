"""AI-assisted repository analysis with deterministic fallbacks.

Each operation builds a task-specific prompt, asks the provider for a JSON
shape, and validates what comes back. Transport failures, vendor errors, and
output that does not match the requested shape are all logged and replaced
by the heuristic result from ``scoring``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from .documentation import readme_quality
from .errors import AIProviderError, ConfigurationError, ParseError
from .factory import create
from .models import (
    AIAnalysisResult,
    AnalysisRequest,
    AnalysisSource,
    CodeQualityAnalysis,
    ProviderConfig,
    ReadmeAnalysis,
    RoadmapContext,
    SourceFile,
)
from .providers.base import AIProvider
from .scoring import basic_roadmap, clamp_score, score_readme

logger = logging.getLogger(__name__)

DEFAULT_README_SCORE = 50.0
DEFAULT_ARCHITECTURE_SCORE = 70.0

CODE_SNAPSHOT_FILES = 5
CODE_SNAPSHOT_CHARS = 500
SECURITY_SNAPSHOT_SNIPPETS = 3
SNAPSHOT_SEPARATOR = "\n\n---\n\n"

README_PROMPT = """You are a technical documentation expert. Analyze this README.md and provide:
1. A quality score from 0-100
2. 3-5 specific suggestions for improvement

Focus on: clarity, completeness, installation instructions, usage examples, and project description.

Return ONLY a JSON object with this structure:
{
  "score": <number>,
  "suggestions": ["suggestion 1", "suggestion 2", ...]
}"""

CODE_QUALITY_PROMPT = """You are a senior software architect. Analyze this code snapshot and provide:
1. An architecture quality score from 0-100
2. 3-5 key insights about code quality, patterns, and architecture

Return ONLY a JSON object:
{
  "score": <number>,
  "insights": ["insight 1", "insight 2", ...]
}"""

SECURITY_PROMPT = """You are a security expert. Review this code for potential security issues.
List 3-5 security concerns (or "None found" if code looks secure).

Return ONLY a JSON array of strings:
["concern 1", "concern 2", ...]"""

ROADMAP_PROMPT = """You are a technology modernization consultant. Based on this project context:
{context}

Provide 3-5 prioritized modernization steps (immediate, short-term, long-term).

Return ONLY a JSON array of strings:
["step 1", "step 2", ...]"""

_FENCE = re.compile(r"^\s*```[a-zA-Z]*\s*\n(.*?)\n\s*```\s*$", re.DOTALL)

T = TypeVar("T")


class _ReadmePayload(BaseModel):
    score: Optional[float] = None
    suggestions: list[str] = []


class _CodeQualityPayload(BaseModel):
    score: Optional[float] = None
    insights: list[str] = []


_StringList = TypeAdapter(list[str])
_ReadmeShape = TypeAdapter(_ReadmePayload)
_CodeQualityShape = TypeAdapter(_CodeQualityPayload)


def _decode_json(raw_text: str) -> Any:
    """Decode model output as JSON, tolerating a surrounding Markdown fence."""
    text = raw_text.strip()
    match = _FENCE.match(text)
    if match:
        text = match.group(1)
    if not text:
        raise ParseError("model output is empty")
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"model output is not valid JSON: {exc.msg}") from exc


def _parse_as(raw_text: str, adapter: TypeAdapter[T]) -> T:
    try:
        return adapter.validate_python(_decode_json(raw_text))
    except ValidationError as exc:
        raise ParseError(f"model output has the wrong shape: {exc.error_count()} error(s)") from exc


def build_code_snapshot(files: list[SourceFile]) -> str:
    """First few files, each truncated, with a path header."""
    return SNAPSHOT_SEPARATOR.join(
        f"// {f.path}\n{f.content[:CODE_SNAPSHOT_CHARS]}"
        for f in files[:CODE_SNAPSHOT_FILES]
    )


class AIAnalyzer:
    """Runs analysis operations against zero or one AI provider."""

    def __init__(self, provider: Optional[AIProvider] = None):
        self._provider = provider

    @classmethod
    def from_config(cls, config: Optional[ProviderConfig]) -> "AIAnalyzer":
        """Build an analyzer; without a config or API key it stays unconfigured.

        An unknown provider name still raises ``ConfigurationError``.
        """
        if config is None or not config.api_key:
            return cls()
        return cls(create(config))

    @property
    def provider(self) -> Optional[AIProvider]:
        return self._provider

    def is_ai_available(self) -> bool:
        return self._provider is not None

    async def analyze_readme(self, readme_content: str) -> ReadmeAnalysis:
        """Score a README and collect improvement suggestions.

        Raises:
            ConfigurationError: no provider is configured. Once one is, vendor
                failures fall back to the heuristic score silently.
        """
        if self._provider is None:
            raise ConfigurationError("AI provider not configured")

        request = AnalysisRequest(
            content=readme_content,
            prompt=README_PROMPT,
            max_tokens=1000,
            temperature=0.5,
        )
        try:
            response = await self._provider.analyze(request)
            payload = _parse_as(response.result, _ReadmeShape)
        except AIProviderError as exc:
            logger.warning("README analysis fell back to heuristic scoring: %s", exc)
            return ReadmeAnalysis(
                quality_score=score_readme(readme_content),
                suggestions=[],
                source=AnalysisSource.HEURISTIC,
            )

        score = DEFAULT_README_SCORE if payload.score is None else payload.score
        return ReadmeAnalysis(
            quality_score=clamp_score(score),
            suggestions=payload.suggestions,
            source=AnalysisSource.AI,
        )

    async def analyze_code_quality(self, files: list[SourceFile]) -> CodeQualityAnalysis:
        neutral = CodeQualityAnalysis(
            architecture_score=DEFAULT_ARCHITECTURE_SCORE,
            insights=[],
            source=AnalysisSource.HEURISTIC,
        )
        if self._provider is None:
            return neutral

        request = AnalysisRequest(
            content=build_code_snapshot(files),
            prompt=CODE_QUALITY_PROMPT,
            max_tokens=800,
            temperature=0.3,
        )
        try:
            response = await self._provider.analyze(request)
            payload = _parse_as(response.result, _CodeQualityShape)
        except AIProviderError as exc:
            logger.warning("Code-quality analysis fell back to defaults: %s", exc)
            return neutral

        score = DEFAULT_ARCHITECTURE_SCORE if payload.score is None else payload.score
        return CodeQualityAnalysis(
            architecture_score=clamp_score(score),
            insights=payload.insights,
            source=AnalysisSource.AI,
        )

    async def analyze_security_concerns(self, code_snippets: list[str]) -> list[str]:
        """Security concerns found by the provider, or an empty list."""
        if self._provider is None:
            return []

        request = AnalysisRequest(
            content=SNAPSHOT_SEPARATOR.join(code_snippets[:SECURITY_SNAPSHOT_SNIPPETS]),
            prompt=SECURITY_PROMPT,
            max_tokens=500,
            temperature=0.2,
        )
        try:
            response = await self._provider.analyze(request)
            return _parse_as(response.result, _StringList)
        except AIProviderError as exc:
            logger.warning("Security scan returned no concerns after provider failure: %s", exc)
            return []

    async def generate_modernization_roadmap(self, context: RoadmapContext) -> list[str]:
        if self._provider is None:
            return basic_roadmap(context)

        context_str = json.dumps(context.model_dump(mode="json"), indent=2)
        request = AnalysisRequest(
            content=context_str,
            prompt=ROADMAP_PROMPT.format(context=context_str),
            max_tokens=600,
            temperature=0.6,
        )
        try:
            response = await self._provider.analyze(request)
            return _parse_as(response.result, _StringList)
        except AIProviderError as exc:
            logger.warning("Roadmap fell back to heuristic steps: %s", exc)
            return basic_roadmap(context)

    async def analyze_repository(
        self,
        readme_content: Optional[str],
        files: list[SourceFile],
        code_snippets: list[str],
        context: RoadmapContext,
    ) -> AIAnalysisResult:
        """Run every operation concurrently and combine the results."""
        readme_score, code_quality, concerns, roadmap = await asyncio.gather(
            readme_quality(readme_content, self),
            self.analyze_code_quality(files),
            self.analyze_security_concerns(code_snippets),
            self.generate_modernization_roadmap(context),
        )
        return AIAnalysisResult(
            readme_quality=readme_score,
            code_quality_insights=code_quality.insights,
            architecture_score=code_quality.architecture_score,
            security_concerns=concerns,
            modernization_suggestions=roadmap,
            ai_available=self.is_ai_available(),
        )
