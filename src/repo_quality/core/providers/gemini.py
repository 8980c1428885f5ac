"""Google Gemini ``generateContent`` adapter.

API docs: https://ai.google.dev/api/generate-content
Auth: API key as the ``key`` query parameter. Errors carry a numeric
``error.code`` alongside ``error.message``.
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

API_BASE = "https://generativelanguage.googleapis.com/v1beta"
PROVIDER_NAME = "Google Gemini"
DEFAULT_MODEL = "gemini-1.5-pro"

AVAILABLE_MODELS = [
    "gemini-1.5-pro",
    "gemini-1.5-flash",
    "gemini-pro",
]


def _total_tokens(data: dict) -> Optional[int]:
    """Read total token count from either snake_case or camelCase usage metadata."""
    usage = data.get("usage_metadata") or data.get("usageMetadata")
    if not isinstance(usage, dict):
        return None
    total = usage.get("total_token_count")
    if total is None:
        total = usage.get("totalTokenCount")
    return total


class GeminiProvider:
    """Adapter for ``POST /v1beta/models/{model}:generateContent``."""

    name = "gemini"

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
            params={"key": self._api_key},
            transport=self._transport,
        )

    def _build_payload(self, request: AnalysisRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "contents": [
                {
                    "role": "user",
                    "parts": [
                        {"text": request.prompt},
                        {"text": request.content},
                    ],
                }
            ],
        }
        generation_config: dict[str, Any] = {}
        max_tokens = request.max_tokens if request.max_tokens is not None else self.max_tokens
        if max_tokens is not None:
            generation_config["maxOutputTokens"] = max_tokens
        temperature = request.temperature if request.temperature is not None else self.temperature
        if temperature is not None:
            generation_config["temperature"] = temperature
        if generation_config:
            payload["generationConfig"] = generation_config
        return payload

    async def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        """Send prompt and content as two parts of one user turn.

        Args:
            request: Prompt, content, and optional per-call limits, sent as
                ``generationConfig`` only when set.

        Returns:
            AnalysisResponse with the first candidate part and the total token count.
        """
        payload = self._build_payload(request)
        url = f"{API_BASE}/models/{self.model}:generateContent"

        async with self._client() as client:
            try:
                response = await client.post(url, json=payload)
            except httpx.HTTPError as exc:
                logger.warning("Gemini request failed: %s", exc)
                raise TransportError(f"{PROVIDER_NAME} request failed: {exc}", PROVIDER_NAME) from exc

        if not response.is_success:
            detail = error_message(response)
            logger.warning("Gemini returned HTTP %d: %s", response.status_code, detail)
            raise VendorError(
                f"{PROVIDER_NAME} analysis failed: {detail}",
                PROVIDER_NAME,
                status_code=response.status_code,
            )

        try:
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
            return AnalysisResponse(
                result=text or "",
                tokens_used=_total_tokens(data),
                model=data.get("modelVersion") or self.model,
                provider=PROVIDER_NAME,
            )
        except (ValidationError, ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
            logger.warning("Gemini returned an unexpected body: %s", exc)
            raise ParseError(f"{PROVIDER_NAME} returned an unexpected response body", PROVIDER_NAME) from exc

    def get_provider_name(self) -> str:
        """Display name stamped on every response."""
        return PROVIDER_NAME

    async def validate_credentials(self) -> bool:
        """List one model with the configured key; any failure means invalid."""
        try:
            async with self._client() as client:
                response = await client.get(f"{API_BASE}/models", params={"pageSize": 1})
            return response.is_success
        except Exception as exc:
            logger.warning("Gemini credential check failed: %s", exc)
            return False

    def get_available_models(self) -> list[str]:
        """Curated Gemini models, as a fresh list."""
        return list(AVAILABLE_MODELS)
