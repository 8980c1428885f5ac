"""OpenAI Chat Completions adapter.

API docs: https://platform.openai.com/docs/api-reference/chat
Auth: bearer token in the Authorization header.
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

API_BASE = "https://api.openai.com/v1"
PROVIDER_NAME = "OpenAI"
DEFAULT_MODEL = "gpt-4-turbo-preview"

AVAILABLE_MODELS = [
    "gpt-4-turbo-preview",
    "gpt-4",
    "gpt-4o",
    "gpt-4o-mini",
    "gpt-3.5-turbo",
]


class OpenAIProvider:
    """Adapter for ``POST /v1/chat/completions``."""

    name = "openai"

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
            headers={"Authorization": f"Bearer {self._api_key}"},
            transport=self._transport,
        )

    def _build_payload(self, request: AnalysisRequest) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": request.prompt},
                {"role": "user", "content": request.content},
            ],
        }
        max_tokens = request.max_tokens if request.max_tokens is not None else self.max_tokens
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens
        temperature = request.temperature if request.temperature is not None else self.temperature
        if temperature is not None:
            payload["temperature"] = temperature
        return payload

    async def analyze(self, request: AnalysisRequest) -> AnalysisResponse:
        """Send the prompt as a system message and the content as a user message.

        Args:
            request: Prompt, content, and optional per-call limits. Limits left
                unset fall back to the adapter defaults, then to OpenAI's.

        Returns:
            AnalysisResponse with the first choice's text and ``usage.total_tokens``.
        """
        payload = self._build_payload(request)

        async with self._client() as client:
            try:
                response = await client.post(f"{API_BASE}/chat/completions", json=payload)
            except httpx.HTTPError as exc:
                logger.warning("OpenAI request failed: %s", exc)
                raise TransportError(f"{PROVIDER_NAME} request failed: {exc}", PROVIDER_NAME) from exc

        if not response.is_success:
            detail = error_message(response)
            logger.warning("OpenAI returned HTTP %d: %s", response.status_code, detail)
            raise VendorError(
                f"{PROVIDER_NAME} analysis failed: {detail}",
                PROVIDER_NAME,
                status_code=response.status_code,
            )

        try:
            data = response.json()
            text = data["choices"][0]["message"]["content"]
            usage = data.get("usage") or {}
            return AnalysisResponse(
                result=text or "",
                tokens_used=usage.get("total_tokens"),
                model=data.get("model") or self.model,
                provider=PROVIDER_NAME,
            )
        except (ValidationError, ValueError, KeyError, IndexError, TypeError, AttributeError) as exc:
            logger.warning("OpenAI returned an unexpected body: %s", exc)
            raise ParseError(f"{PROVIDER_NAME} returned an unexpected response body", PROVIDER_NAME) from exc

    def get_provider_name(self) -> str:
        """Display name stamped on every response."""
        return PROVIDER_NAME

    async def validate_credentials(self) -> bool:
        """List models with the configured key; any failure means invalid."""
        try:
            async with self._client() as client:
                response = await client.get(f"{API_BASE}/models")
            return response.is_success
        except Exception as exc:
            logger.warning("OpenAI credential check failed: %s", exc)
            return False

    def get_available_models(self) -> list[str]:
        """Curated chat models, as a fresh list."""
        return list(AVAILABLE_MODELS)
