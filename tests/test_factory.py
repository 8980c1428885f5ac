"""Tests for provider selection and construction."""

import httpx
import pytest

from repo_quality.core.errors import ConfigurationError
from repo_quality.core.factory import (
    config_from_env,
    create,
    create_from_env,
    get_supported_providers,
    validate_provider,
)
from repo_quality.core.models import ProviderConfig
from repo_quality.core.providers.anthropic import AnthropicProvider
from repo_quality.core.providers.gemini import GeminiProvider
from repo_quality.core.providers.openai import OpenAIProvider


@pytest.mark.parametrize(
    "name, cls, display",
    [
        ("openai", OpenAIProvider, "OpenAI"),
        ("anthropic", AnthropicProvider, "Anthropic"),
        ("gemini", GeminiProvider, "Google Gemini"),
    ],
)
def test_create_each_provider(name, cls, display):
    provider = create(ProviderConfig(provider=name, api_key="test-key"))
    assert isinstance(provider, cls)
    assert provider.get_provider_name() == display


def test_create_is_case_insensitive():
    assert isinstance(create(ProviderConfig(provider="Anthropic", api_key="k")), AnthropicProvider)


def test_create_with_custom_model_and_defaults():
    provider = create(
        ProviderConfig(provider="openai", api_key="k", model="gpt-4", max_tokens=300, temperature=0.2)
    )
    assert provider.model == "gpt-4"
    assert provider.max_tokens == 300
    assert provider.temperature == 0.2


def test_create_unknown_provider():
    with pytest.raises(ConfigurationError, match="Unknown AI provider: unknown") as exc_info:
        create(ProviderConfig(provider="unknown", api_key="test-key"))
    assert "Supported providers: openai, anthropic, gemini" in str(exc_info.value)


def test_create_missing_api_key_checked_before_dispatch():
    with pytest.raises(ConfigurationError, match="API key is required"):
        create(ProviderConfig(provider="openai", api_key=""))
    with pytest.raises(ConfigurationError, match="API key is required"):
        create(ProviderConfig(provider="unknown", api_key=""))


def test_get_supported_providers_order():
    assert get_supported_providers() == ["openai", "anthropic", "gemini"]


def test_create_from_env_openai():
    provider = create_from_env({"AI_PROVIDER": "openai", "OPENAI_API_KEY": "test-openai-key"})
    assert isinstance(provider, OpenAIProvider)
    assert provider.get_provider_name() == "OpenAI"


def test_create_from_env_anthropic_and_gemini():
    assert isinstance(
        create_from_env({"AI_PROVIDER": "anthropic", "ANTHROPIC_API_KEY": "a"}), AnthropicProvider
    )
    assert isinstance(create_from_env({"AI_PROVIDER": "GEMINI", "GEMINI_API_KEY": "g"}), GeminiProvider)


def test_create_from_env_defaults_to_openai():
    provider = create_from_env({"OPENAI_API_KEY": "test-key"})
    assert provider.get_provider_name() == "OpenAI"


def test_create_from_env_missing_key():
    with pytest.raises(ConfigurationError, match="API key not found for openai provider"):
        create_from_env({"AI_PROVIDER": "openai"})


def test_create_from_env_key_for_other_provider_does_not_count():
    with pytest.raises(ConfigurationError, match="API key not found for anthropic provider"):
        create_from_env({"AI_PROVIDER": "anthropic", "OPENAI_API_KEY": "k"})


def test_create_from_env_unknown_provider():
    with pytest.raises(ConfigurationError, match="Unknown AI provider: mistral"):
        create_from_env({"AI_PROVIDER": "mistral", "MISTRAL_API_KEY": "k"})


def test_config_from_env_overrides():
    config = config_from_env(
        {
            "OPENAI_API_KEY": "k",
            "AI_MODEL": "gpt-4",
            "AI_MAX_TOKENS": "2048",
            "AI_TEMPERATURE": "0.7",
        }
    )
    assert config.provider == "openai"
    assert config.model == "gpt-4"
    assert config.max_tokens == 2048
    assert config.temperature == 0.7


def test_config_from_env_invalid_number_propagates():
    with pytest.raises(ValueError):
        config_from_env({"OPENAI_API_KEY": "k", "AI_MAX_TOKENS": "lots"})


@pytest.mark.asyncio
async def test_validate_provider_success():
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"data": []}))
    config = ProviderConfig(provider="openai", api_key="k")
    assert await validate_provider(config, transport=transport) is True


@pytest.mark.asyncio
async def test_validate_provider_swallows_configuration_errors():
    assert await validate_provider(ProviderConfig(provider="unknown", api_key="k")) is False
    assert await validate_provider(ProviderConfig(provider="openai", api_key="")) is False


@pytest.mark.asyncio
async def test_validate_provider_rejected_key():
    transport = httpx.MockTransport(lambda request: httpx.Response(401, json={"error": {"message": "bad"}}))
    config = ProviderConfig(provider="gemini", api_key="k")
    assert await validate_provider(config, transport=transport) is False
