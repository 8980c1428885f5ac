"""Capability contract every vendor adapter implements, plus helpers they share."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import httpx

from ..models import AnalysisRequest, AnalysisResponse


def error_message(response: httpx.Response) -> str:
    """Pull ``error.message`` out of a vendor error body, else the status text.

    OpenAI, Anthropic and Gemini all nest the human-readable text under
    ``error.message``.
    """
    try:
        data = response.json()
    except ValueError:
        return response.reason_phrase
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return str(error["message"])
    return response.reason_phrase


@runtime_checkable
class AIProvider(Protocol):
    """Vendor-agnostic AI capability.

    Implementations hold only their API key, default model, and default
    generation limits. Every call is independent.
    """

    name: str

    async def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        """Run one analysis call.

        Raises:
            VendorError: the vendor answered with a non-success status.
            TransportError: the request never got an answer.
            ParseError: a success body was not in the vendor's envelope.
        """
        ...

    def get_provider_name(self) -> str:
        """Canonical display name, e.g. ``"OpenAI"``."""
        ...

    async def validate_credentials(self) -> bool:
        """Probe the vendor with a cheap authenticated call. Never raises."""
        ...

    def get_available_models(self) -> list[str]:
        """Static, vendor-curated model identifiers."""
        ...
