"""Gemini text generator adapter.

Wraps the google-genai async client. Provider errors are left to
propagate unchanged; the planner service classifies them by message.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from google import genai
from google.genai import types

from ...config import GenerationConfig, get_config
from ...domain.errors import ConfigurationError


@dataclass
class GeminiTextGenerator:
    """Text generator backed by Google Gemini.

    This adapter implements TextGeneratorPort.

    Attributes:
        config: Generation configuration (API key, model, sampling)
    """

    config: GenerationConfig = field(default_factory=lambda: get_config().generation)

    _client: Optional[Any] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _get_client(self) -> Any:
        if self._client is not None:
            return self._client
        if not self.config.api_key:
            raise ConfigurationError(
                "Gemini API key not configured",
                setting_name="TG_GEN_API_KEY",
                expected_type="str",
            )
        self._client = genai.Client(api_key=self.config.api_key)
        return self._client

    async def generate(self, prompt: str) -> str:
        client = self._get_client()
        self._logger.debug(
            "Calling Gemini",
            extra={"model": self.config.model, "prompt_length": len(prompt)},
        )
        response = await client.aio.models.generate_content(
            model=self.config.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=self.config.temperature,
                max_output_tokens=self.config.max_output_tokens,
            ),
        )
        text = response.text or ""
        self._logger.info(
            "Gemini response received",
            extra={"model": self.config.model, "response_length": len(text)},
        )
        return text
