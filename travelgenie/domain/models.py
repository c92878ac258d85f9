"""Immutable domain models for the itinerary engine.

All models are frozen dataclasses with slots. Each pipeline stage has
its own type so the stage a value came from tells which invariants
hold for it:

- RawPlan: a parseable JSON object, nothing more
- RepairedPlan: every mandatory place is covered
- EnrichedPlan: every event has coordinates and travel metrics
- ComprehensiveItinerary: the canonical day/event/meal record
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, Dict, Mapping, Optional

MEAL_CATEGORIES = ("breakfast", "lunch", "dinner")


class BudgetTier(Enum):
    """Budget level selected by the traveller."""

    BUDGET = "budget"
    MEDIUM = "medium"
    LUXURY = "luxury"


class Preference(Enum):
    """Closed vocabulary of trip interests."""

    ART = "art"
    FOOD = "food"
    ADVENTURE = "adventure"
    HISTORY = "history"
    NATURE = "nature"
    NIGHTLIFE = "nightlife"
    SHOPPING = "shopping"
    RELAXATION = "relaxation"


class RecoveryTier(Enum):
    """Which recovery strategy produced a RawPlan."""

    DIRECT = "direct"
    LENIENT = "lenient"
    WHOLE_DAYS = "whole_days"
    WHOLE_EVENTS = "whole_events"
    LAST_BRACE = "last_brace"


class Severity(Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A leveled diagnostic event emitted by a pipeline stage.

    Attributes:
        stage: Name of the stage that emitted it (e.g. "recovery")
        severity: How much the event degrades the result
        message: Short human-readable description
        details: Structured context (JSON-serializable values)
    """

    stage: str
    severity: Severity
    message: str
    details: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stage": self.stage,
            "severity": self.severity.value,
            "message": self.message,
            "details": dict(self.details),
        }


@dataclass(frozen=True, slots=True)
class GeoLocation:
    """GPS coordinates representing a geographic location.

    (0, 0) is the sentinel used when geocoding failed.
    """

    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90 <= self.latitude <= 90:
            raise ValueError(
                f"Latitude must be between -90 and 90, got {self.latitude}"
            )
        if not -180 <= self.longitude <= 180:
            raise ValueError(
                f"Longitude must be between -180 and 180, got {self.longitude}"
            )

    @classmethod
    def unknown(cls) -> GeoLocation:
        return cls(0.0, 0.0)

    @property
    def is_zero(self) -> bool:
        return self.latitude == 0 and self.longitude == 0

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.latitude, "lng": self.longitude}


@dataclass(frozen=True, slots=True)
class MandatoryPlace:
    """A place the traveller already chose and the plan must contain.

    Attributes:
        id: Caller-side identifier
        name: Display name, used for coverage matching
        address: Street address, used for geocoding
        coordinates: Known coordinates, if any
        rating: Visitor rating on a 0-5 scale
        price_level: 0 (free) to 4 (very expensive)
    """

    id: str
    name: str
    address: str = ""
    coordinates: Optional[GeoLocation] = None
    rating: Optional[float] = None
    price_level: Optional[int] = None


@dataclass(frozen=True, slots=True)
class TripRequest:
    """A validated trip request.

    Attributes:
        destination: City or region of the trip
        start_date: First day of the trip
        end_date: Last day of the trip (inclusive)
        budget: Budget tier
        preferences: Interests, at least one
        mandatory_places: Places that must appear, at least one
        must_see: Optional free-text notes
    """

    destination: str
    start_date: date
    end_date: date
    budget: BudgetTier
    preferences: tuple[Preference, ...]
    mandatory_places: tuple[MandatoryPlace, ...]
    must_see: str = ""

    @property
    def duration_days(self) -> int:
        """Number of days in the inclusive date range."""
        return (self.end_date - self.start_date).days + 1


@dataclass(frozen=True, slots=True)
class TripPreferences:
    """Echo of the caller's request stored on the final itinerary."""

    budget: str = ""
    interests: tuple[str, ...] = field(default_factory=tuple)
    must_see: str = ""
    mandatory_places: tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_request(cls, request: TripRequest) -> TripPreferences:
        return cls(
            budget=request.budget.value,
            interests=tuple(p.value for p in request.preferences),
            must_see=request.must_see,
            mandatory_places=tuple(p.name for p in request.mandatory_places),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "budget": self.budget,
            "interests": list(self.interests),
            "mustSee": self.must_see,
            "mandatoryPlaces": list(self.mandatory_places),
        }


# ---------------------------------------------------------------------------
# Stage 1: recovery
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RawPlan:
    """Untyped plan tree recovered from the generator's text.

    Attributes:
        data: The parsed JSON object
        tier: Recovery tier that produced it
        cleaned_text: The text that was finally parsed
        diagnostics: Events emitted while recovering
    """

    data: Mapping[str, Any]
    tier: RecoveryTier = RecoveryTier.DIRECT
    cleaned_text: str = field(default="", repr=False)
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def was_repaired(self) -> bool:
        return self.tier not in (RecoveryTier.DIRECT, RecoveryTier.LENIENT)


# ---------------------------------------------------------------------------
# Stage 2: coverage repair
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class PlanEvent:
    """One event of a plan, read from the generator's tree."""

    name: str
    description: str = ""
    address: str = ""
    coordinates: Optional[GeoLocation] = None
    start_time: str = ""
    end_time: str = ""
    duration_minutes: int = 0
    category: str = ""
    estimated_cost: str = "$0"
    tips: tuple[str, ...] = field(default_factory=tuple)

    @property
    def is_meal(self) -> bool:
        return self.category.strip().casefold() in MEAL_CATEGORIES


@dataclass(frozen=True, slots=True)
class BudgetBreakdown:
    activities: str = "$0"
    meals: str = "$0"
    transportation: str = "$0"
    total: str = "$0"

    def to_dict(self) -> Dict[str, str]:
        return {
            "activities": self.activities,
            "meals": self.meals,
            "transportation": self.transportation,
            "total": self.total,
        }


@dataclass(frozen=True, slots=True)
class PlanDay:
    day_number: int
    date: str = ""
    theme: str = ""
    events: tuple[PlanEvent, ...] = field(default_factory=tuple)
    budget_breakdown: BudgetBreakdown = field(default_factory=BudgetBreakdown)


@dataclass(frozen=True, slots=True)
class EmergencyInfo:
    emergency_number: str = "112"
    embassy_contact: str = "Contact your country's nearest embassy or consulate"
    important_phrases: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "emergencyNumber": self.emergency_number,
            "embassyContact": self.embassy_contact,
            "importantPhrases": list(self.important_phrases),
        }


@dataclass(frozen=True, slots=True)
class TripMeta:
    """Trip-level fields passed through from the generator's tree."""

    title: str = ""
    destination: str = ""
    duration_days: Optional[int] = None
    start_date: str = ""
    end_date: str = ""
    total_estimated_cost: str = ""
    travel_tips: tuple[str, ...] = field(default_factory=tuple)
    packing_suggestions: tuple[str, ...] = field(default_factory=tuple)
    local_customs: tuple[str, ...] = field(default_factory=tuple)
    emergency_info: Optional[EmergencyInfo] = None
    wakeup_time: str = ""


@dataclass(frozen=True, slots=True)
class RepairedPlan:
    """Plan whose days cover every mandatory place.

    Attributes:
        meta: Trip-level fields
        days: Days with mandatory events injected and prioritized
        injected: Names of the mandatory places that had to be synthesized
        diagnostics: Events emitted up to and including repair
    """

    meta: TripMeta
    days: tuple[PlanDay, ...]
    injected: tuple[str, ...] = field(default_factory=tuple)
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Stage 3: enrichment
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class EnrichedEvent:
    """A plan event with guaranteed coordinates and travel metrics.

    Metrics describe the trip to the chronologically next event of the
    same day and are None for the last event of a day.
    """

    event: PlanEvent
    coordinates: GeoLocation
    travel_time_to_next_minutes: Optional[int] = None
    travel_distance_to_next_km: Optional[float] = None
    geocode_failed: bool = False


@dataclass(frozen=True, slots=True)
class EnrichedDay:
    day_number: int
    date: str
    theme: str
    events: tuple[EnrichedEvent, ...]
    budget_breakdown: BudgetBreakdown = field(default_factory=BudgetBreakdown)


@dataclass(frozen=True, slots=True)
class EnrichedPlan:
    meta: TripMeta
    days: tuple[EnrichedDay, ...]
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Stage 4: canonical itinerary
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ItineraryEvent:
    id: str
    name: str
    description: str
    address: str
    coordinates: GeoLocation
    start_time: str
    end_time: str
    duration: int
    category: str
    estimated_cost: str
    tips: tuple[str, ...] = field(default_factory=tuple)
    travel_time_to_next: Optional[int] = None
    travel_distance_to_next: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "address": self.address,
            "coordinates": self.coordinates.to_dict(),
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
            "category": self.category,
            "estimatedCost": self.estimated_cost,
            "tips": list(self.tips),
            "travelTimeToNext": self.travel_time_to_next,
            "travelDistanceToNext": self.travel_distance_to_next,
        }


@dataclass(frozen=True, slots=True)
class DayMeals:
    breakfast: Optional[ItineraryEvent] = None
    lunch: Optional[ItineraryEvent] = None
    dinner: Optional[ItineraryEvent] = None

    def present(self) -> tuple[ItineraryEvent, ...]:
        """Return the filled meal slots in breakfast/lunch/dinner order."""
        return tuple(m for m in (self.breakfast, self.lunch, self.dinner) if m is not None)

    def to_dict(self) -> Dict[str, Any]:
        return {
            name: (meal.to_dict() if meal is not None else None)
            for name, meal in zip(MEAL_CATEGORIES, (self.breakfast, self.lunch, self.dinner))
        }


@dataclass(frozen=True, slots=True)
class ItineraryDay:
    day_number: int
    date: str
    theme: str
    events: tuple[ItineraryEvent, ...]
    meals: DayMeals
    daily_budget_breakdown: BudgetBreakdown

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dayNumber": self.day_number,
            "date": self.date,
            "theme": self.theme,
            "events": [e.to_dict() for e in self.events],
            "meals": self.meals.to_dict(),
            "dailyBudgetBreakdown": self.daily_budget_breakdown.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class ComprehensiveItinerary:
    """Trip-level aggregate returned to the caller."""

    id: str
    trip_title: str
    destination: str
    duration_days: int
    start_date: str
    end_date: str
    total_estimated_cost: str
    days: tuple[ItineraryDay, ...]
    travel_tips: tuple[str, ...] = field(default_factory=tuple)
    packing_suggestions: tuple[str, ...] = field(default_factory=tuple)
    local_customs: tuple[str, ...] = field(default_factory=tuple)
    emergency_info: EmergencyInfo = field(default_factory=EmergencyInfo)
    preferences: TripPreferences = field(default_factory=TripPreferences)
    wakeup_time: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "tripTitle": self.trip_title,
            "destination": self.destination,
            "durationDays": self.duration_days,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "totalEstimatedCost": self.total_estimated_cost,
            "days": [d.to_dict() for d in self.days],
            "travelTips": list(self.travel_tips),
            "packingSuggestions": list(self.packing_suggestions),
            "localCustoms": list(self.local_customs),
            "emergencyInfo": self.emergency_info.to_dict(),
            "preferences": self.preferences.to_dict(),
            "wakeupTime": self.wakeup_time,
        }


@dataclass(frozen=True, slots=True)
class PipelineResult:
    """Final itinerary plus every diagnostic the stages emitted."""

    itinerary: ComprehensiveItinerary
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        return tuple(
            d for d in self.diagnostics
            if d.severity in (Severity.WARNING, Severity.ERROR)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "itinerary": self.itinerary.to_dict(),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
        }
