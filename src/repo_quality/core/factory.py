"""Provider selection and construction.

Configuration mistakes fail fast here with ``ConfigurationError``. Only
``validate_provider`` turns them into a plain ``False``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Optional

import httpx

from .errors import ConfigurationError
from .models import AIProviderName, ProviderConfig
from .providers import anthropic, gemini, openai
from .providers.anthropic import AnthropicProvider
from .providers.base import AIProvider
from .providers.gemini import GeminiProvider
from .providers.openai import OpenAIProvider

logger = logging.getLogger(__name__)

PROVIDER_CLASSES = {
    AIProviderName.OPENAI.value: OpenAIProvider,
    AIProviderName.ANTHROPIC.value: AnthropicProvider,
    AIProviderName.GEMINI.value: GeminiProvider,
}

API_KEY_ENV_VARS = {
    AIProviderName.OPENAI.value: "OPENAI_API_KEY",
    AIProviderName.ANTHROPIC.value: "ANTHROPIC_API_KEY",
    AIProviderName.GEMINI.value: "GEMINI_API_KEY",
}

# Static metadata, readable without an API key or an adapter instance.
PROVIDER_INFO = {
    key: {
        "name": module.PROVIDER_NAME,
        "default_model": module.DEFAULT_MODEL,
        "models": list(module.AVAILABLE_MODELS),
    }
    for key, module in (
        (AIProviderName.OPENAI.value, openai),
        (AIProviderName.ANTHROPIC.value, anthropic),
        (AIProviderName.GEMINI.value, gemini),
    )
}


def get_supported_providers() -> list[str]:
    """Provider keys in their stable enumeration order."""
    return [p.value for p in AIProviderName]


def create(
    config: ProviderConfig,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AIProvider:
    """Build the adapter named by ``config.provider``.

    Args:
        config: Provider name (case-insensitive), API key, and optional defaults.
        transport: Optional httpx transport handed to the adapter.

    Raises:
        ConfigurationError: the API key is empty or the provider is unknown.
    """
    if not config.api_key:
        raise ConfigurationError(f"API key is required for {config.provider} provider")

    provider_cls = PROVIDER_CLASSES.get(config.provider.lower())
    if provider_cls is None:
        raise ConfigurationError(
            f"Unknown AI provider: {config.provider}. "
            f"Supported providers: {', '.join(get_supported_providers())}"
        )

    provider = provider_cls(
        config.api_key,
        config.model,
        max_tokens=config.max_tokens,
        temperature=config.temperature,
        transport=transport,
    )
    logger.debug("Created %s provider (model=%s)", provider.get_provider_name(), provider.model)
    return provider


def config_from_env(env: Mapping[str, str]) -> ProviderConfig:
    """Resolve a ``ProviderConfig`` from an environment-style mapping.

    Numeric overrides are converted with ``int``/``float``; malformed values
    raise ``ValueError`` for the caller to handle.
    """
    provider = (env.get("AI_PROVIDER") or AIProviderName.OPENAI.value).lower()

    key_var = API_KEY_ENV_VARS.get(provider)
    if key_var is None:
        raise ConfigurationError(f"Unknown AI provider: {provider}")

    api_key = env.get(key_var)
    if not api_key:
        raise ConfigurationError(f"API key not found for {provider} provider")

    max_tokens = env.get("AI_MAX_TOKENS")
    temperature = env.get("AI_TEMPERATURE")
    return ProviderConfig(
        provider=provider,
        api_key=api_key,
        model=env.get("AI_MODEL") or None,
        max_tokens=int(max_tokens) if max_tokens else None,
        temperature=float(temperature) if temperature else None,
    )


def create_from_env(
    env: Mapping[str, str],
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AIProvider:
    """Build an adapter from ``AI_PROVIDER`` and the matching ``*_API_KEY``.

    ``env`` is passed in explicitly (typically ``os.environ``) so resolution
    can be exercised without touching process state.
    """
    return create(config_from_env(env), transport=transport)


async def validate_provider(
    config: ProviderConfig,
    *,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> bool:
    """Build the adapter and probe its credentials.

    Every failure, including an unknown provider or a missing key, becomes
    ``False``. A bad key and an unreachable vendor look the same here.
    """
    try:
        provider = create(config, transport=transport)
        return await provider.validate_credentials()
    except Exception as exc:
        logger.warning("Provider validation failed for %s: %s", config.provider, exc)
        return False
