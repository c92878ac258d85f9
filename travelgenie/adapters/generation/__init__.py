"""Generation adapters - Implementations of TextGeneratorPort.

Available implementations:
- GeminiTextGenerator: Google Gemini via the google-genai SDK
"""

from .gemini_adapter import GeminiTextGenerator

__all__ = ["GeminiTextGenerator"]
