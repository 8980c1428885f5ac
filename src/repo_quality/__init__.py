"""Repo Quality MCP Server.

Ask your AI how healthy a repository is: README quality, code-quality
insights, security concerns, and a modernization roadmap, backed by OpenAI,
Anthropic, or Google Gemini with deterministic fallbacks.
"""

__version__ = "0.1.0"
