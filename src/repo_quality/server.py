"""Repo Quality MCP Server.

FastMCP server exposing AI-assisted repository analysis as read-only tools.
Provider configuration comes from AI_PROVIDER and the matching *_API_KEY
environment variable; without them every tool answers from heuristics.
Run: repo-quality-mcp
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from .core.analyzer import AIAnalyzer
from .core.errors import ConfigurationError
from .core.factory import PROVIDER_INFO, create_from_env, get_supported_providers, validate_provider
from .core.models import ProviderConfig, RoadmapContext, SourceFile
from .core.scoring import score_readme

logger = logging.getLogger(__name__)

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True)

_analyzer: Optional[AIAnalyzer] = None


def get_analyzer() -> AIAnalyzer:
    """Build the session analyzer from the process environment on first use."""
    global _analyzer
    if _analyzer is None:
        try:
            _analyzer = AIAnalyzer(create_from_env(os.environ))
            logger.info("AI provider configured: %s", _analyzer.provider.get_provider_name())
        except (ConfigurationError, ValueError) as exc:
            # ValueError also covers pydantic rejecting AI_MAX_TOKENS=0.
            logger.warning("AI provider not configured, using heuristics only: %s", exc)
            _analyzer = AIAnalyzer()
    return _analyzer


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncIterator[None]:
    """Configure logging and resolve the AI provider once per session."""
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    get_analyzer()
    yield


mcp = FastMCP(
    "Repo Quality",
    instructions="Ask your AI how healthy a repository is: README quality, code-quality insights, security concerns, and a modernization roadmap. Uses OpenAI, Anthropic, or Gemini when configured, deterministic heuristics otherwise.",
    lifespan=lifespan,
)


# ─── Tool 1: Providers ───────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def ai_providers() -> dict:
    """Supported AI providers with their display names and curated models."""
    analyzer = get_analyzer()
    providers = []
    for key in get_supported_providers():
        info = PROVIDER_INFO[key]
        providers.append({
            "provider": key,
            "name": info["name"],
            "default_model": info["default_model"],
            "models": list(info["models"]),
        })
    active = analyzer.provider.get_provider_name() if analyzer.provider else None
    return {
        "providers": providers,
        "active_provider": active,
        "summary": f"Active provider: {active}" if active else "No AI provider configured, heuristics only",
    }


# ─── Tool 2: Validate ────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def ai_validate_provider(provider: str, api_key: str, model: str = "") -> dict:
    """Check whether an API key works for a provider.

    Args:
        provider: One of 'openai', 'anthropic', 'gemini'.
        api_key: The key to check. It is never echoed back.
        model: Optional model override.
    """
    config = ProviderConfig(provider=provider, api_key=api_key, model=model or None)
    valid = await validate_provider(config)
    return {
        "provider": provider,
        "valid": valid,
        "summary": f"Credentials for {provider} are {'valid' if valid else 'invalid or unreachable'}.",
    }


# ─── Tool 3: README ──────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def repo_readme_quality(readme: str) -> dict:
    """Score a README from 0-100 and suggest improvements.

    Args:
        readme: Full README.md content.
    """
    analyzer = get_analyzer()
    if not analyzer.is_ai_available():
        score = score_readme(readme)
        return {
            "title": "README Quality",
            "quality_score": score,
            "suggestions": [],
            "source": "heuristic",
            "summary": f"README scored {score:.0f}/100 (heuristic; no AI provider configured)",
        }

    result = await analyzer.analyze_readme(readme)
    return {
        "title": "README Quality",
        **result.model_dump(mode="json"),
        "summary": f"README scored {result.quality_score:.0f}/100 ({result.source.value})",
    }


# ─── Tool 4: Code Quality ────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def repo_code_quality(files: list[SourceFile]) -> dict:
    """Architecture score and code-quality insights for a handful of source files.

    Args:
        files: Objects with 'path' and 'content'. Only the first 5 files
               and the first 500 characters of each are sent to the model.
    """
    result = await get_analyzer().analyze_code_quality(files)
    return {
        "title": "Code Quality",
        **result.model_dump(mode="json"),
        "summary": f"Architecture score {result.architecture_score:.0f}/100 with {len(result.insights)} insight(s)",
    }


# ─── Tool 5: Security ────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def repo_security_concerns(snippets: list[str]) -> dict:
    """Potential security concerns in code snippets (first 3 are reviewed).

    Args:
        snippets: Source code snippets to review.
    """
    concerns = await get_analyzer().analyze_security_concerns(snippets)
    return {
        "title": "Security Concerns",
        "concerns": concerns,
        "count": len(concerns),
        "summary": f"{len(concerns)} potential concern(s) found" if concerns else "No concerns reported",
    }


# ─── Tool 6: Roadmap ─────────────────────────────────────────────────────────


@mcp.tool(annotations=READ_ONLY)
async def repo_modernization_roadmap(
    technologies: list[str],
    last_update: str,
    has_tests: bool,
    has_ci_cd: bool,
) -> dict:
    """Prioritized modernization steps for a project.

    Args:
        technologies: Languages and frameworks in use (e.g., ['python', 'django']).
        last_update: ISO-8601 timestamp of the last commit or release.
        has_tests: Whether the project has automated tests.
        has_ci_cd: Whether the project has CI/CD configured.
    """
    context = RoadmapContext(
        technologies=technologies,
        last_update=datetime.fromisoformat(last_update),
        has_tests=has_tests,
        has_ci_cd=has_ci_cd,
    )
    roadmap = await get_analyzer().generate_modernization_roadmap(context)
    return {
        "title": "Modernization Roadmap",
        "steps": roadmap,
        "summary": " | ".join(roadmap) if roadmap else "No steps suggested",
    }


def main():
    """Entry point for the CLI command."""
    mcp.run()


if __name__ == "__main__":
    main()
