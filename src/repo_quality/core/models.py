"""Pydantic models shared by adapters, the analyzer, and the server. None of
them carry vendor-specific fields.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AIProviderName(str, Enum):
    """Supported AI vendors, in the order callers enumerate them."""

    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    GEMINI = "gemini"


class AnalysisSource(str, Enum):
    """Where an analysis result came from."""

    AI = "ai"
    HEURISTIC = "heuristic"


class AnalysisRequest(BaseModel):
    """A vendor-agnostic analysis call."""

    model_config = ConfigDict(frozen=True)

    content: str = Field(description="Text payload to analyze")
    prompt: str = Field(description="Instruction text for the model")
    max_tokens: Optional[int] = Field(None, gt=0, description="Upper bound on response length")
    temperature: Optional[float] = Field(None, ge=0.0, le=2.0)


class AnalysisResponse(BaseModel):
    """Normalized result of a vendor call."""

    result: str = Field(description="Raw text returned by the vendor")
    tokens_used: Optional[int] = None
    model: Optional[str] = Field(None, description="Model the vendor reports having used")
    provider: str = Field(description="Canonical provider display name, set by the adapter")


class ProviderConfig(BaseModel):
    """Explicit configuration for building an adapter.

    ``provider`` stays a plain string so that unsupported names reach the
    factory and fail there with a ``ConfigurationError``.
    """

    model_config = ConfigDict(frozen=True)

    provider: str
    api_key: str = ""
    model: Optional[str] = None
    max_tokens: Optional[int] = Field(None, gt=0)
    temperature: Optional[float] = None


class SourceFile(BaseModel):
    """A repository file handed to code-quality analysis."""

    path: str
    content: str


class RoadmapContext(BaseModel):
    """Project facts used to build a modernization roadmap."""

    technologies: list[str] = Field(default_factory=list)
    last_update: datetime
    has_tests: bool
    has_ci_cd: bool


class ReadmeAnalysis(BaseModel):
    """README quality score with improvement suggestions."""

    quality_score: float = Field(ge=0.0, le=100.0)
    suggestions: list[str] = Field(default_factory=list)
    source: AnalysisSource


class CodeQualityAnalysis(BaseModel):
    """Architecture score with code-quality insights."""

    architecture_score: float = Field(ge=0.0, le=100.0)
    insights: list[str] = Field(default_factory=list)
    source: AnalysisSource


class AIAnalysisResult(BaseModel):
    """Combined output of a full repository pass."""

    readme_quality: float = Field(ge=0.0, le=100.0)
    code_quality_insights: list[str] = Field(default_factory=list)
    architecture_score: float = Field(ge=0.0, le=100.0)
    security_concerns: list[str] = Field(default_factory=list)
    modernization_suggestions: list[str] = Field(default_factory=list)
    ai_available: bool
    computed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
