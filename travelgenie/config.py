"""Centralized configuration using Pydantic Settings.

This module provides a single source of truth for all configuration:
- generative-text provider credentials and sampling parameters
- geocoding provider, rate limiting and caching
- logging format and level

Configuration can be overridden via environment variables:
- TG_GEN_API_KEY=...
- TG_GEO_PROVIDER=google
- TG_GEO_CONCURRENCY=4
- TG_LOG_STRUCTURED=true
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GenerationConfig(BaseSettings):
    """Generative-text provider configuration.

    Environment variables prefixed with TG_GEN_.
    """

    model_config = SettingsConfigDict(env_prefix="TG_GEN_")

    api_key: Optional[str] = None
    model: str = "gemini-2.0-flash"
    temperature: float = 0.7
    max_output_tokens: int = 8192


class GeocodingConfig(BaseSettings):
    """Geocoding configuration.

    Environment variables prefixed with TG_GEO_.
    """

    model_config = SettingsConfigDict(env_prefix="TG_GEO_")

    provider: Literal["nominatim", "google"] = "nominatim"
    api_key: Optional[str] = None
    user_agent: str = "travelgenie-itinerary"
    timeout_seconds: int = 10
    rate_limit_delay: float = 1.0
    max_retries: int = 2
    error_wait_seconds: float = 2.0
    concurrency: int = Field(default=1, ge=1)
    cache_ttl_seconds: Optional[float] = 24 * 3600
    cache_max_size: Optional[int] = 2048


class ObservabilityConfig(BaseSettings):
    """Logging and observability configuration.

    Environment variables prefixed with TG_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="TG_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = False  # Set True for JSON logging


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.geocoding.provider)
        print(config.generation.model)

    Environment variables prefixed with TG_.
    """

    model_config = SettingsConfigDict(env_prefix="TG_")

    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    geocoding: GeocodingConfig = Field(default_factory=GeocodingConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache."""
    get_config.cache_clear()
