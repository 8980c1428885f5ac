"""Error taxonomy for the AI capability layer.

Configuration problems are raised synchronously when an adapter is built.
Runtime failures from a vendor call all derive from ``AIProviderError`` so the
analyzer can swap in its heuristic result with a single ``except`` clause.
"""

from __future__ import annotations

from typing import Optional


class RepoQualityError(Exception):
    """Base class for all repo-quality errors."""


class ConfigurationError(RepoQualityError, ValueError):
    """Missing or invalid provider name, or missing/empty API key."""


class AIProviderError(RepoQualityError):
    """A vendor call failed after the adapter was constructed."""

    def __init__(self, message: str, provider: str = "") -> None:
        super().__init__(message)
        self.provider = provider


class TransportError(AIProviderError):
    """DNS, connection, or timeout failure while talking to a vendor."""


class VendorError(AIProviderError):
    """The vendor answered with a non-success HTTP status."""

    def __init__(self, message: str, provider: str = "", status_code: Optional[int] = None) -> None:
        super().__init__(message, provider)
        self.status_code = status_code


class ParseError(AIProviderError):
    """The vendor answered successfully but not in the expected shape."""
