"""Validation of caller-supplied trip requests.

Accepts the payload shape of the web form (``dateRange: {from, to}``,
camelCase place fields) as well as snake_case keys, and raises a
ValidationError naming the first offending field.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, List, Mapping, Optional

import dateparser

from ..domain.errors import ValidationError
from ..domain.models import (
    BudgetTier,
    GeoLocation,
    MandatoryPlace,
    Preference,
    TripRequest,
)
from ..engine.tree import read_coordinates


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO or free-form date; None if it cannot be read."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    parsed = dateparser.parse(
        value,
        settings={"DATE_ORDER": "YMD", "PREFER_DATES_FROM": "future"},
    )
    return parsed.date() if parsed else None


def _required_text(payload: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    raise ValidationError(f"{keys[0].replace('_', ' ').capitalize()} is required", field_name=keys[0])


def _number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def parse_mandatory_places(items: Any) -> tuple[MandatoryPlace, ...]:
    """Validate the mandatory place list (non-empty, every place named)."""
    if not isinstance(items, list) or not items:
        raise ValidationError("At least one mandatory place is required", field_name="mandatory_places")

    places: List[MandatoryPlace] = []
    for index, item in enumerate(items):
        if isinstance(item, str):
            item = {"name": item}
        if not isinstance(item, Mapping):
            raise ValidationError(
                f"Mandatory place #{index + 1} must be an object",
                field_name="mandatory_places",
            )
        name = item.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ValidationError(
                f"Mandatory place #{index + 1} has no name",
                field_name="mandatory_places",
            )

        price_level = item.get("price_level", item.get("priceLevel"))
        coordinates: Optional[GeoLocation] = read_coordinates(item.get("coordinates"))
        places.append(
            MandatoryPlace(
                id=str(item.get("id") or f"place-{index + 1}"),
                name=name.strip(),
                address=str(item.get("address") or "").strip(),
                coordinates=coordinates,
                rating=_number(item.get("rating")),
                price_level=int(price_level) if _number(price_level) is not None else None,
            )
        )
    return tuple(places)


def _parse_preferences(value: Any) -> tuple[Preference, ...]:
    if not isinstance(value, list) or not value:
        raise ValidationError("At least one preference is required", field_name="preferences")
    known = {p.value: p for p in Preference}
    preferences = []
    for tag in value:
        key = str(tag).strip().lower()
        if key not in known:
            raise ValidationError(
                f"Unknown preference {tag!r}; expected one of {', '.join(sorted(known))}",
                field_name="preferences",
            )
        if known[key] not in preferences:
            preferences.append(known[key])
    return tuple(preferences)


def _parse_budget(value: Any) -> BudgetTier:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("Budget is required", field_name="budget")
    try:
        return BudgetTier(value.strip().lower())
    except ValueError:
        raise ValidationError(
            f"Unknown budget {value!r}; expected budget, medium or luxury",
            field_name="budget",
        ) from None


def parse_trip_request(payload: Mapping[str, Any]) -> TripRequest:
    """Validate a raw request payload into a TripRequest.

    Raises:
        ValidationError: If a required field is missing or malformed.
    """
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object", field_name="body")

    destination = _required_text(payload, "destination")

    date_range = payload.get("dateRange", payload.get("date_range"))
    date_range = date_range if isinstance(date_range, Mapping) else {}
    start = parse_date(date_range.get("from", payload.get("start_date")))
    end = parse_date(date_range.get("to", payload.get("end_date")))
    if start is None or end is None:
        raise ValidationError("Date range is required", field_name="date_range")
    if end < start:
        raise ValidationError("Date range ends before it starts", field_name="date_range")

    must_see = payload.get("mustSee", payload.get("must_see")) or ""

    return TripRequest(
        destination=destination,
        start_date=start,
        end_date=end,
        budget=_parse_budget(payload.get("budget")),
        preferences=_parse_preferences(payload.get("preferences")),
        mandatory_places=parse_mandatory_places(
            payload.get("mandatoryPlaces", payload.get("mandatory_places"))
        ),
        must_see=str(must_see).strip(),
    )
