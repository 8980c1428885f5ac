"""Anthropic Messages API adapter.

API docs: https://docs.anthropic.com/en/api/messages
Auth: ``x-api-key`` header plus a pinned ``anthropic-version``.
The API rejects requests without ``max_tokens``, so a default is always sent.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
from pydantic import ValidationError

from ..errors import ParseError, TransportError, VendorError
from ..models import AnalysisRequest, AnalysisResponse
from .base import error_message

logger = logging.getLogger(__name__)

API_BASE = "https://api.anthropic.com/v1"
API_VERSION = "2023-06-01"
PROVIDER_NAME = "Anthropic"
DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
DEFAULT_MAX_TOKENS = 1024

AVAILABLE_MODELS = [
    "claude-3-5-sonnet-20241022",
    "claude-3-opus-20240229",
    "claude-3-haiku-20240307",
]


class AnthropicProvider:
    """Adapter for ``POST /v1/messages``."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str,
        model: Optional[str] = None,
        *,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._api_key = api_key
        self.model = model or DEFAULT_MODEL
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._timeout, connect=10.0),
            headers={
                "x-api-key": self._api_key,
                "anthropic-version": API_VERSION,
            },
            transport=self._transport,
        )

    def _build_payload(self, request: AnalysisRequest) -> dict[str, Any]:
        max_tokens = request.max_tokens or self.max_tokens or DEFAULT_MAX_TOKENS
        payload: dict[str, Any] = {
            "model": self.model,
            "max_tokens": max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": request.prompt},
                        {"type": "text", "text": request.content},
                    ],
                }
            ],
        }
        temperature = request.temperature if request.temperature is not None else self.temperature
        if temperature is not None:
            payload["temperature"] = temperature
        return payload

    async def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        """Send prompt and content as two text blocks of a single user message.

        Args:
            request: Prompt, content, and optional per-call limits. Without any
                ``max_tokens`` the adapter sends 1024.

        Returns:
            AnalysisResponse with the first text block and input plus output tokens.
        """
        payload = self._build_payload(request)

        async with self._client() as client:
            try:
                response = await client.post(f"{API_BASE}/messages", json=payload)
            except httpx.HTTPError as exc:
                logger.warning("Anthropic request failed: %s", exc)
                raise TransportError(f"{PROVIDER_NAME} request failed: {exc}", PROVIDER_NAME) from exc

        if not response.is_success:
            detail = error_message(response)
            logger.warning("Anthropic returned HTTP %d: %s", response.status_code, detail)
            raise VendorError(
                f"{PROVIDER_NAME} analysis failed: {detail}",
                PROVIDER_NAME,
                status_code=response.status_code,
            )

        try:
            data = response.json()
            text = data["content"][0]["text"]
            # Anthropic reports input and output separately, never a total.
            tokens_used = None
            usage = data.get("usage")
            if isinstance(usage, dict):
                tokens_used = (usage.get("input_tokens") or 0) + (usage.get("output_tokens") or 0)
            return AnalysisResponse(
                result=text or "",
                tokens_used=tokens_used,
                model=data.get("model") or self.model,
                provider=PROVIDER_NAME,
            )
        except (ValidationError, ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
            logger.warning("Anthropic returned an unexpected body: %s", exc)
            raise ParseError(f"{PROVIDER_NAME} returned an unexpected response body", PROVIDER_NAME) from exc

    def get_provider_name(self) -> str:
        """Display name stamped on every response."""
        return PROVIDER_NAME

    async def validate_credentials(self) -> bool:
        """Fetch one model with the configured key; any failure means invalid."""
        try:
            async with self._client() as client:
                response = await client.get(f"{API_BASE}/models", params={"limit": 1})
            return response.is_success
        except Exception as exc:
            logger.warning("Anthropic credential check failed: %s", exc)
            return False

    def get_available_models(self) -> list[str]:
        """Curated Claude models, as a fresh list."""
        return list(AVAILABLE_MODELS)
