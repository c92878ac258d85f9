"""Domain layer - Core business models and errors.

This module contains immutable domain models and typed errors
used throughout the application. No external dependencies.
"""

from .errors import (
    ConfigurationError,
    GeocodingError,
    RecoveryError,
    TravelGenieError,
    UpstreamError,
    ValidationError,
    classify_upstream_error,
)
from .models import (
    BudgetBreakdown,
    BudgetTier,
    ComprehensiveItinerary,
    DayMeals,
    Diagnostic,
    EmergencyInfo,
    EnrichedDay,
    EnrichedEvent,
    EnrichedPlan,
    GeoLocation,
    ItineraryDay,
    ItineraryEvent,
    MandatoryPlace,
    PipelineResult,
    PlanDay,
    PlanEvent,
    Preference,
    RawPlan,
    RecoveryTier,
    RepairedPlan,
    Severity,
    TripMeta,
    TripPreferences,
    TripRequest,
)

__all__ = [
    # Models
    "GeoLocation",
    "MandatoryPlace",
    "TripRequest",
    "TripPreferences",
    "BudgetTier",
    "Preference",
    "RecoveryTier",
    "RawPlan",
    "PlanEvent",
    "PlanDay",
    "BudgetBreakdown",
    "TripMeta",
    "EmergencyInfo",
    "RepairedPlan",
    "EnrichedEvent",
    "EnrichedDay",
    "EnrichedPlan",
    "ItineraryEvent",
    "DayMeals",
    "ItineraryDay",
    "ComprehensiveItinerary",
    "Diagnostic",
    "Severity",
    "PipelineResult",
    # Errors
    "TravelGenieError",
    "ValidationError",
    "RecoveryError",
    "GeocodingError",
    "UpstreamError",
    "ConfigurationError",
    "classify_upstream_error",
]
