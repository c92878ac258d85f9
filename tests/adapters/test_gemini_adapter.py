"""Tests for the Gemini text generator adapter."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from travelgenie.adapters.generation import GeminiTextGenerator
from travelgenie.config import GenerationConfig
from travelgenie.domain.errors import ConfigurationError


def test_missing_api_key_raises_configuration_error():
    generator = GeminiTextGenerator(GenerationConfig(api_key=None))

    with pytest.raises(ConfigurationError) as exc_info:
        asyncio.run(generator.generate("plan a trip"))

    assert exc_info.value.status_code == 500
    assert exc_info.value.setting_name == "TG_GEN_API_KEY"


def test_generate_returns_response_text():
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=SimpleNamespace(text='{"days": []}'))
    config = GenerationConfig(api_key="key", model="gemini-test", temperature=0.2, max_output_tokens=512)

    with patch("travelgenie.adapters.generation.gemini_adapter.genai.Client", return_value=client) as factory:
        text = asyncio.run(GeminiTextGenerator(config).generate("plan a trip"))

    assert text == '{"days": []}'
    factory.assert_called_once_with(api_key="key")
    kwargs = client.aio.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-test"
    assert kwargs["contents"] == "plan a trip"
    assert kwargs["config"].temperature == 0.2
    assert kwargs["config"].max_output_tokens == 512


def test_empty_response_becomes_empty_string():
    client = MagicMock()
    client.aio.models.generate_content = AsyncMock(return_value=SimpleNamespace(text=None))
    generator = GeminiTextGenerator(GenerationConfig(api_key="key"))
    generator._client = client

    assert asyncio.run(generator.generate("plan")) == ""
