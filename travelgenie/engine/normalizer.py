"""Normalization of an enriched plan into the canonical itinerary.

Meal slots take the first event of their category; every other event,
including a second "lunch", stays in the day's event list so nothing
the generator produced is dropped.
"""

from __future__ import annotations

import logging
import re
from datetime import timedelta
from typing import Dict, List, Optional

from ..domain.models import (
    MEAL_CATEGORIES,
    ComprehensiveItinerary,
    DayMeals,
    EmergencyInfo,
    EnrichedDay,
    EnrichedEvent,
    EnrichedPlan,
    ItineraryDay,
    ItineraryEvent,
    TripPreferences,
    TripRequest,
)

logger = logging.getLogger(__name__)

_SLUG = re.compile(r"[^a-z0-9]+")


def _slug(text: str) -> str:
    return _SLUG.sub("-", text.casefold()).strip("-") or "trip"


def to_itinerary_event(enriched: EnrichedEvent, event_id: str) -> ItineraryEvent:
    event = enriched.event
    return ItineraryEvent(
        id=event_id,
        name=event.name,
        description=event.description,
        address=event.address,
        coordinates=enriched.coordinates,
        start_time=event.start_time,
        end_time=event.end_time,
        duration=event.duration_minutes,
        category=event.category,
        estimated_cost=event.estimated_cost,
        tips=event.tips,
        travel_time_to_next=enriched.travel_time_to_next_minutes,
        travel_distance_to_next=enriched.travel_distance_to_next_km,
    )


def partition_day(day: EnrichedDay, date_text: str = "") -> ItineraryDay:
    """Split a day's events into meal slots and the remaining events."""
    meals: Dict[str, ItineraryEvent] = {}
    events: List[ItineraryEvent] = []

    for index, enriched in enumerate(day.events, start=1):
        item = to_itinerary_event(enriched, f"day-{day.day_number}-{index}")
        slot = enriched.event.category.strip().casefold()
        if enriched.event.is_meal and slot not in meals:
            meals[slot] = item
        else:
            events.append(item)

    missing = [slot for slot in MEAL_CATEGORIES if slot not in meals]
    if missing:
        logger.debug(
            "Day has empty meal slots",
            extra={"day_number": day.day_number, "slots": missing},
        )

    return ItineraryDay(
        day_number=day.day_number,
        date=day.date or date_text,
        theme=day.theme,
        events=tuple(events),
        meals=DayMeals(**meals),
        daily_budget_breakdown=day.budget_breakdown,
    )


def _day_date(request: Optional[TripRequest], day_number: int) -> str:
    if request is None or not 1 <= day_number <= request.duration_days:
        return ""
    return (request.start_date + timedelta(days=day_number - 1)).isoformat()


def normalize(
    plan: EnrichedPlan,
    request: Optional[TripRequest] = None,
) -> ComprehensiveItinerary:
    """Reshape an enriched plan into a ComprehensiveItinerary.

    Trip-level fields come from the plan; the request, when given,
    fills in what the plan lacks (destination, dates) and is echoed as
    the itinerary's preferences.

    Args:
        plan: Enriched plan.
        request: The trip request the plan was generated for.

    Returns:
        The canonical itinerary.
    """
    meta = plan.meta
    days = tuple(partition_day(day, _day_date(request, day.day_number)) for day in plan.days)

    destination = meta.destination or (request.destination if request else "")
    duration = len(days) or meta.duration_days or (request.duration_days if request else 0)
    start = meta.start_date or (request.start_date.isoformat() if request else "")
    end = meta.end_date or (request.end_date.isoformat() if request else "")
    if not start and days:
        start = days[0].date
    if not end and days:
        end = days[-1].date

    title = meta.title or f"{duration}-Day Trip to {destination or 'Your Destination'}"
    itinerary_id = f"{_slug(destination)}-{start or 'undated'}-{duration}d"

    logger.info(
        "Itinerary normalized",
        extra={"itinerary_id": itinerary_id, "days": len(days)},
    )
    return ComprehensiveItinerary(
        id=itinerary_id,
        trip_title=title,
        destination=destination,
        duration_days=duration,
        start_date=start,
        end_date=end,
        total_estimated_cost=meta.total_estimated_cost,
        days=days,
        travel_tips=meta.travel_tips,
        packing_suggestions=meta.packing_suggestions,
        local_customs=meta.local_customs,
        emergency_info=meta.emergency_info or EmergencyInfo(),
        preferences=TripPreferences.from_request(request) if request else TripPreferences(),
        wakeup_time=meta.wakeup_time,
    )
