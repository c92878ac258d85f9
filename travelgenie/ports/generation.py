"""Generation port - Abstraction for the generative-text provider.

The engine makes no assumption about the provider's output beyond
"approximately JSON"; it may be fenced, chatty or truncated.
"""

from __future__ import annotations

from typing import Protocol


class TextGeneratorPort(Protocol):
    """Port for generative-text providers.

    Implementation: adapters/generation/gemini_adapter.py
    """

    async def generate(self, prompt: str) -> str:
        """Return the provider's raw text for ``prompt``.

        Raises:
            ConfigurationError: If the provider is not configured.
            Exception: Provider errors, classified by the caller.
        """
        ...
