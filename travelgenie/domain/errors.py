"""Typed domain errors for the itinerary engine.

Every failure the engine can surface to a caller is one of these
types. Each carries the HTTP-style status its class maps to, so the
outer surface can render a single structured error response.

All errors inherit from TravelGenieError and can optionally
wrap a root cause exception for debugging.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class TravelGenieError(Exception):
    """Base error for the itinerary domain.

    Attributes:
        message: Human-readable error description
        cause: Optional underlying exception that caused this error
    """

    message: str
    cause: Optional[Exception] = field(default=None, repr=False)

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def __post_init__(self) -> None:
        super().__init__(self.message)

    @property
    def kind(self) -> str:
        return "internal"

    @property
    def status_code(self) -> int:
        return 500

    def to_payload(self) -> Dict[str, Any]:
        """Render the error as the structured response body."""
        return {"error": self.message, "kind": self.kind, "status": self.status_code}


@dataclass
class ValidationError(TravelGenieError):
    """A required request field is missing, empty or malformed.

    Attributes:
        field_name: Name of the offending request field
    """

    field_name: str = ""

    @property
    def kind(self) -> str:
        return "validation"

    @property
    def status_code(self) -> int:
        return 400


@dataclass
class RecoveryError(TravelGenieError):
    """No recovery tier produced a parseable plan.

    Attributes:
        raw_text: The payload as received from the generator
        cleaned_text: The last candidate handed to the JSON parser
    """

    raw_text: str = field(default="", repr=False)
    cleaned_text: str = field(default="", repr=False)

    @property
    def kind(self) -> str:
        return "unparseable"

    @property
    def status_code(self) -> int:
        return 502


@dataclass
class GeocodingError(TravelGenieError):
    """Failed to geocode an address.

    The enricher absorbs this error and degrades the event's
    coordinates; it is only surfaced when raised outside a pipeline.

    Attributes:
        query: The address query that failed
        is_rate_limited: Whether the failure was due to rate limiting
    """

    query: str = ""
    is_rate_limited: bool = False

    @property
    def kind(self) -> str:
        return "quota" if self.is_rate_limited else "network"

    @property
    def status_code(self) -> int:
        return 429 if self.is_rate_limited else 503


UPSTREAM_STATUS = {
    "quota": 429,
    "network": 503,
    "configuration": 500,
    "unknown": 500,
}


@dataclass
class UpstreamError(TravelGenieError):
    """A collaborator (generator or geocoder) failed.

    Attributes:
        category: One of "network", "quota", "configuration", "unknown"
        provider: Name of the collaborator that failed
    """

    category: str = "unknown"
    provider: str = ""

    @property
    def kind(self) -> str:
        return self.category

    @property
    def status_code(self) -> int:
        return UPSTREAM_STATUS.get(self.category, 500)


@dataclass
class ConfigurationError(TravelGenieError):
    """Invalid or missing configuration.

    Attributes:
        setting_name: Name of the problematic setting
        expected_type: Expected type or format
    """

    setting_name: str = ""
    expected_type: Optional[str] = None

    @property
    def kind(self) -> str:
        return "configuration"

    @property
    def status_code(self) -> int:
        return 500


_QUOTA_MARKERS = ("quota", "rate limit", "rate-limit", "429", "resource_exhausted", "too many requests")
_CONFIG_MARKERS = ("api key", "api_key", "permission", "unauthorized", "401", "403")
_NETWORK_MARKERS = ("network", "timeout", "timed out", "connection", "unavailable", "503", "fetch")


def classify_upstream_error(exc: BaseException, provider: str = "") -> UpstreamError:
    """Bucket a collaborator exception by the content of its message.

    Quota markers win over configuration markers, which win over
    network markers; anything else is "unknown".
    """
    if isinstance(exc, UpstreamError):
        return exc

    text = str(exc).lower()
    if any(marker in text for marker in _QUOTA_MARKERS):
        category, message = "quota", "Generation quota exceeded, please retry later"
    elif any(marker in text for marker in _CONFIG_MARKERS):
        category, message = "configuration", "Upstream provider rejected the configured credentials"
    elif any(marker in text for marker in _NETWORK_MARKERS):
        category, message = "network", "Upstream provider is unreachable"
    else:
        category, message = "unknown", "Upstream provider failed"

    cause = exc if isinstance(exc, Exception) else None
    return UpstreamError(message, cause=cause, category=category, provider=provider)
