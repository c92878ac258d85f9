"""Readers turning the generator's JSON tree into plan dataclasses.

The generator is only asked for "approximately" our schema, so the
readers accept the spellings it is known to drift to (``title`` for
``name``, ``time`` for ``start_time``, a nested ``location`` object,
a separate ``meals`` mapping) and never raise on a malformed field:
a bad value is read as absent.
"""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping, Optional

from ..domain.models import (
    MEAL_CATEGORIES,
    BudgetBreakdown,
    EmergencyInfo,
    GeoLocation,
    PlanDay,
    PlanEvent,
    TripMeta,
)

_CLOCK = re.compile(r"^\s*(\d{1,2})(?::(\d{2}))?\s*([AaPp]\.?[Mm]\.?)?\s*$")
_HOURS = re.compile(r"(\d+(?:\.\d+)?)\s*(?:h|hr|hrs|hour|hours)\b", re.IGNORECASE)
_MINUTES = re.compile(r"(\d+)\s*(?:m|min|mins|minute|minutes)\b", re.IGNORECASE)


def time_to_minutes(value: str) -> Optional[int]:
    """Parse "HH:MM" (24h, or 12h with AM/PM) into minutes after midnight."""
    match = _CLOCK.match(value or "")
    if not match:
        return None
    hours = int(match.group(1))
    minutes = int(match.group(2) or 0)
    meridiem = (match.group(3) or "").lower().replace(".", "")
    if meridiem == "pm" and hours < 12:
        hours += 12
    elif meridiem == "am" and hours == 12:
        hours = 0
    if hours > 23 or minutes > 59:
        return None
    return hours * 60 + minutes


def _text(value: Any, default: str = "") -> str:
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return default


def _texts(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(t for t in (_text(v) for v in value) if t)


def _cost(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"${value:g}"
    return _text(value, "$0") or "$0"


def read_coordinates(value: Any) -> Optional[GeoLocation]:
    """Read {lat, lng} (or latitude/longitude, lat/lon); None if unusable."""
    if not isinstance(value, Mapping):
        return None
    lat = value.get("lat", value.get("latitude"))
    lng = value.get("lng", value.get("lon", value.get("longitude")))
    try:
        return GeoLocation(float(lat), float(lng))
    except (TypeError, ValueError):
        return None


def _duration(raw: Mapping[str, Any], start: str, end: str) -> int:
    value = raw.get("duration", raw.get("duration_minutes"))
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return max(int(value), 0)
    if isinstance(value, str):
        hours = _HOURS.search(value)
        minutes = _MINUTES.search(value)
        if hours or minutes:
            total = float(hours.group(1)) * 60 if hours else 0.0
            total += int(minutes.group(1)) if minutes else 0
            return int(total)
        if value.strip().isdigit():
            return int(value.strip())
    start_min, end_min = time_to_minutes(start), time_to_minutes(end)
    if start_min is not None and end_min is not None and end_min >= start_min:
        return end_min - start_min
    return 0


def read_event(raw: Any, category: str = "") -> Optional[PlanEvent]:
    """Read one event object; None if it is not an object."""
    if not isinstance(raw, Mapping):
        return None

    location = raw.get("location")
    nested = location if isinstance(location, Mapping) else {}
    name = _text(raw.get("name")) or _text(raw.get("title")) or _text(nested.get("name"))
    address = _text(raw.get("address")) or _text(nested.get("address"))
    if not address and isinstance(location, str):
        address = location.strip()

    coordinates = read_coordinates(raw.get("coordinates")) or read_coordinates(
        nested.get("coordinates")
    )
    start = _text(raw.get("start_time")) or _text(raw.get("startTime")) or _text(raw.get("time"))
    end = _text(raw.get("end_time")) or _text(raw.get("endTime"))

    return PlanEvent(
        name=name,
        description=_text(raw.get("description")),
        address=address,
        coordinates=coordinates,
        start_time=start,
        end_time=end,
        duration_minutes=_duration(raw, start, end),
        category=_text(raw.get("category")) or category,
        estimated_cost=_cost(raw.get("estimated_cost", raw.get("estimatedCost"))),
        tips=_texts(raw.get("tips")),
    )


def _read_budget(raw: Any) -> BudgetBreakdown:
    if not isinstance(raw, Mapping):
        return BudgetBreakdown()
    return BudgetBreakdown(
        activities=_cost(raw.get("activities")),
        meals=_cost(raw.get("meals")),
        transportation=_cost(raw.get("transportation")),
        total=_cost(raw.get("total")),
    )


def _events_of(raw_day: Mapping[str, Any]) -> Iterable[PlanEvent]:
    raw_events = raw_day.get("events")
    if not isinstance(raw_events, list):
        raw_events = raw_day.get("activities")
    for raw in raw_events if isinstance(raw_events, list) else ():
        event = read_event(raw)
        if event is not None:
            yield event

    # Older prompt shape: meals kept apart from events
    meals = raw_day.get("meals")
    if isinstance(meals, Mapping):
        for slot in MEAL_CATEGORIES:
            event = read_event(meals.get(slot), category=slot)
            if event is not None:
                yield event


def read_day(raw: Any, index: int) -> Optional[PlanDay]:
    """Read the day at ``index`` (0-based); None if it is not an object."""
    if not isinstance(raw, Mapping):
        return None
    number = raw.get("day_number", raw.get("day"))
    if not isinstance(number, int) or isinstance(number, bool):
        number = index + 1
    return PlanDay(
        day_number=number,
        date=_text(raw.get("date")),
        theme=_text(raw.get("theme")),
        events=tuple(_events_of(raw)),
        budget_breakdown=_read_budget(raw.get("daily_budget_breakdown")),
    )


def read_days(data: Mapping[str, Any]) -> tuple[PlanDay, ...]:
    raw_days = data.get("days")
    if not isinstance(raw_days, list):
        return ()
    days = (read_day(raw, i) for i, raw in enumerate(raw_days))
    return tuple(day for day in days if day is not None)


def read_meta(data: Mapping[str, Any]) -> TripMeta:
    emergency = data.get("emergency_info")
    duration = data.get("duration_days")
    return TripMeta(
        title=_text(data.get("trip_title")) or _text(data.get("title")),
        destination=_text(data.get("destination")),
        duration_days=duration if isinstance(duration, int) and not isinstance(duration, bool) else None,
        start_date=_text(data.get("start_date")),
        end_date=_text(data.get("end_date")),
        total_estimated_cost=_text(data.get("total_estimated_cost")),
        travel_tips=_texts(data.get("travel_tips")),
        packing_suggestions=_texts(data.get("packing_suggestions")),
        local_customs=_texts(data.get("local_customs")),
        emergency_info=(
            EmergencyInfo(
                emergency_number=_text(emergency.get("emergency_number"), "112") or "112",
                embassy_contact=_text(emergency.get("embassy_contact")) or EmergencyInfo().embassy_contact,
                important_phrases=_texts(emergency.get("important_phrases")),
            )
            if isinstance(emergency, Mapping)
            else None
        ),
        wakeup_time=_text(data.get("wakeup_time")),
    )
