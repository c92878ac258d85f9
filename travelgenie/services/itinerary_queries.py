"""Read-only views over a ComprehensiveItinerary.

Meals live in their own slots on each day; the schedule views merge
them back with the other events in time order.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ..domain.models import ComprehensiveItinerary, ItineraryDay, ItineraryEvent
from ..engine.tree import time_to_minutes


def get_day(itinerary: ComprehensiveItinerary, day_number: int) -> Optional[ItineraryDay]:
    for day in itinerary.days:
        if day.day_number == day_number:
            return day
    return None


def _time_key(event: ItineraryEvent) -> Tuple[int, int]:
    minutes = time_to_minutes(event.start_time)
    return (0, minutes) if minutes is not None else (1, 0)


def all_events(day: ItineraryDay) -> List[ItineraryEvent]:
    """Meals and other events of ``day`` in start-time order."""
    return sorted(day.meals.present() + day.events, key=_time_key)


def day_schedule(itinerary: ComprehensiveItinerary, day_number: int) -> Optional[Dict[str, Any]]:
    """Build the full schedule of one day.

    Args:
        itinerary: The itinerary to read.
        day_number: 1-based day number.

    Returns:
        The day's fields plus ``schedule`` (meals merged with events),
        ``totalEvents``, ``estimatedDuration`` in minutes and the
        distinct ``categories`` in order of appearance, or None if the
        day does not exist.
    """
    day = get_day(itinerary, day_number)
    if day is None:
        return None

    schedule = all_events(day)
    categories = list(dict.fromkeys(event.category for event in schedule))
    return {
        **day.to_dict(),
        "schedule": [event.to_dict() for event in schedule],
        "totalEvents": len(schedule),
        "estimatedDuration": sum(event.duration for event in schedule),
        "categories": categories,
    }


def day_overview(itinerary: ComprehensiveItinerary, day_number: int) -> Optional[Dict[str, Any]]:
    """Summarize one day: time span, counts, budget and first/last event."""
    day = get_day(itinerary, day_number)
    if day is None:
        return None

    schedule = all_events(day)
    first = schedule[0] if schedule else None
    last = schedule[-1] if schedule else None
    return {
        "dayNumber": day.day_number,
        "date": day.date,
        "theme": day.theme,
        "startTime": first.start_time if first else "",
        "endTime": last.end_time if last else "",
        "totalEvents": len(schedule),
        "totalActivities": len(day.events),
        "budget": day.daily_budget_breakdown.to_dict(),
        "firstEvent": first.name if first else "",
        "lastEvent": last.name if last else "",
    }


def itinerary_summary(itinerary: ComprehensiveItinerary) -> Dict[str, Any]:
    """Trip info plus a day-by-day overview.

    ``totalEvents`` counts the meals actually present, not a fixed
    three per day.
    """
    return {
        "tripInfo": {
            "title": itinerary.trip_title,
            "destination": itinerary.destination,
            "duration": itinerary.duration_days,
            "startDate": itinerary.start_date,
            "endDate": itinerary.end_date,
            "totalCost": itinerary.total_estimated_cost,
        },
        "days": [day_overview(itinerary, day.day_number) for day in itinerary.days],
        "totalDays": len(itinerary.days),
        "totalEvents": sum(len(day.events) + len(day.meals.present()) for day in itinerary.days),
        "preferences": itinerary.preferences.to_dict(),
        "wakeupTime": itinerary.wakeup_time,
    }
