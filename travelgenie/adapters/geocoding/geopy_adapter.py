"""geopy geocoder adapter.

Resolves event addresses with geopy's Nominatim (default) or GoogleV3
geocoder, with:
- Result caching via CachePort (misses included)
- Configuration injection
- Rate limiting and retries via geopy's RateLimiter
- Service failures raised as GeocodingError for the enricher to absorb

geopy is synchronous; lookups run in a worker thread so the event
loop stays free.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from geopy.exc import (
    GeocoderAuthenticationFailure,
    GeocoderInsufficientPrivileges,
    GeocoderQuotaExceeded,
    GeocoderRateLimited,
    GeocoderServiceError,
)
from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import GoogleV3, Nominatim

from ...config import GeocodingConfig, get_config
from ...domain.errors import ConfigurationError, GeocodingError
from ...domain.models import GeoLocation
from ...ports.cache import CachePort
from ..cache.memory_cache import InMemoryCache


def _default_cache() -> InMemoryCache[GeoLocation]:
    config = get_config().geocoding
    return InMemoryCache(
        name="geocode",
        default_ttl_seconds=config.cache_ttl_seconds,
        max_size=config.cache_max_size,
    )


@dataclass
class GeopyGeocoderAdapter:
    """Geocoder adapter backed by geopy.

    This adapter implements GeocoderPort.

    Attributes:
        config: Geocoding configuration
        cache: Cache for geocoding results
    """

    config: GeocodingConfig = field(default_factory=lambda: get_config().geocoding)
    cache: CachePort[GeoLocation] = field(default_factory=_default_cache)

    _geocode_fn: Optional[Any] = field(default=None, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def _build_geolocator(self) -> Any:
        if self.config.provider == "google":
            if not self.config.api_key:
                raise ConfigurationError(
                    "Google geocoding requires an API key",
                    setting_name="TG_GEO_API_KEY",
                    expected_type="str",
                )
            return GoogleV3(api_key=self.config.api_key, timeout=self.config.timeout_seconds)
        return Nominatim(
            user_agent=self.config.user_agent,
            timeout=self.config.timeout_seconds,
        )

    def _get_geocoder(self) -> Any:
        """Get or initialize the rate-limited geocode callable."""
        if self._geocode_fn is not None:
            return self._geocode_fn

        self._logger.debug(
            "Initializing geocoder",
            extra={
                "provider": self.config.provider,
                "timeout": self.config.timeout_seconds,
            },
        )
        geolocator = self._build_geolocator()
        self._geocode_fn = RateLimiter(
            geolocator.geocode,
            min_delay_seconds=self.config.rate_limit_delay,
            max_retries=self.config.max_retries,
            error_wait_seconds=self.config.error_wait_seconds,
            swallow_exceptions=False,
        )
        return self._geocode_fn

    def lookup(self, address: str) -> Optional[GeoLocation]:
        """Blocking lookup of ``address``.

        Raises:
            GeocodingError: On timeouts, outages, quota or rate limits.
            ConfigurationError: On missing or rejected credentials.
        """
        query = address.strip()
        if not query:
            return None

        cache_key = query.casefold()
        found, cached = self.cache.lookup(cache_key)
        if found:
            self._logger.debug("Geocode cache hit", extra={"query": query})
            return cached

        geocode_fn = self._get_geocoder()
        try:
            location = geocode_fn(query)
        except (GeocoderQuotaExceeded, GeocoderRateLimited) as e:
            raise GeocodingError(
                "Geocoding quota exceeded", cause=e, query=query, is_rate_limited=True
            ) from e
        except (GeocoderAuthenticationFailure, GeocoderInsufficientPrivileges) as e:
            raise ConfigurationError(
                "Geocoding credentials rejected",
                cause=e,
                setting_name="TG_GEO_API_KEY",
            ) from e
        except GeocoderServiceError as e:
            self._logger.warning(
                "Geocode service error",
                extra={"query": query, "error": str(e)},
            )
            raise GeocodingError("Geocoding service unavailable", cause=e, query=query) from e

        if location is None:
            self._logger.debug("Geocode returned no result", extra={"query": query})
            self.cache.store(cache_key, None)
            return None

        result = GeoLocation(
            latitude=float(location.latitude),
            longitude=float(location.longitude),
        )
        self._logger.debug(
            "Geocode success",
            extra={"query": query, "lat": result.latitude, "lng": result.longitude},
        )
        self.cache.store(cache_key, result)
        return result

    async def resolve(self, address: str) -> Optional[GeoLocation]:
        return await asyncio.to_thread(self.lookup, address)
