"""Mandatory-place coverage validation and repair.

A mandatory place counts as present when some event name, case-folded,
contains the place's case-folded name or is contained in it. The rule
is deliberately loose so that "Louvre" and "Louvre Museum" match; it
also over-matches ("Louvre" vs "Louvre Hotel").

Repair runs in two phases: inject an event for every missing place,
then move events matching a mandatory place to the front of each day.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Iterable, List, Optional, Sequence

from ..diagnostics import DiagnosticRecorder
from ..domain.models import (
    MandatoryPlace,
    PlanDay,
    PlanEvent,
    RawPlan,
    RepairedPlan,
)
from .tree import read_days, read_meta

logger = logging.getLogger(__name__)

FEATURED_START = "12:00"
FEATURED_END = "14:00"
FEATURED_DURATION_MIN = 120
FEATURED_CATEGORY = "activity"
PRICE_LEVEL_STEP = 15


def names_match(event_name: str, place_name: str) -> bool:
    """Case-insensitive, bidirectional substring match.

    Blank names never match: the empty string is a substring of
    every name.
    """
    event_key = event_name.strip().casefold()
    place_key = place_name.strip().casefold()
    if not event_key or not place_key:
        return False
    return place_key in event_key or event_key in place_key


def is_mandatory(event: PlanEvent, mandatory: Sequence[MandatoryPlace]) -> bool:
    return any(names_match(event.name, place.name) for place in mandatory)


def find_missing(
    days: Iterable[PlanDay], mandatory: Sequence[MandatoryPlace]
) -> List[MandatoryPlace]:
    """Return the mandatory places no event name matches, in input order."""
    names = [event.name for day in days for event in day.events]
    return [
        place
        for place in mandatory
        if not any(names_match(name, place.name) for name in names)
    ]


def estimate_cost(price_level: Optional[int]) -> str:
    if price_level is None or price_level <= 0:
        return "$0"
    return f"${price_level * PRICE_LEVEL_STEP}"


def rating_tips(rating: Optional[float]) -> tuple[str, ...]:
    if rating is None:
        return ()
    if rating >= 4.5:
        return (
            f"Top rated by visitors ({rating:.1f}/5)",
            "Expect crowds at peak hours, arrive early",
        )
    if rating >= 4.0:
        return (f"Highly rated by visitors ({rating:.1f}/5)",)
    return (f"Rated {rating:.1f}/5 by visitors",)


def synthesize_event(place: MandatoryPlace, destination: str) -> PlanEvent:
    """Build the featured midday event standing in for a missing place."""
    where = f" in {destination}" if destination else ""
    return PlanEvent(
        name=place.name,
        description=f"Visit {place.name}, one of your must-see places{where}.",
        address=place.address,
        coordinates=place.coordinates,
        start_time=FEATURED_START,
        end_time=FEATURED_END,
        duration_minutes=FEATURED_DURATION_MIN,
        category=FEATURED_CATEGORY,
        estimated_cost=estimate_cost(place.price_level),
        tips=rating_tips(place.rating),
    )


def prioritize(
    events: Sequence[PlanEvent], mandatory: Sequence[MandatoryPlace]
) -> tuple[PlanEvent, ...]:
    """Stable partition: mandatory matches first, relative order kept."""
    first = [e for e in events if is_mandatory(e, mandatory)]
    rest = [e for e in events if not is_mandatory(e, mandatory)]
    return tuple(first + rest)


def repair(
    plan: RawPlan,
    mandatory: Sequence[MandatoryPlace],
    destination: Optional[str] = None,
) -> RepairedPlan:
    """Guarantee every mandatory place appears in the plan.

    Missing place ``i`` is injected at the front of day
    ``min(i, day_count - 1)``; a plan without days gets one day to hold
    them. Duplicate events are left in place.

    Args:
        plan: Recovered plan tree.
        mandatory: Places that must be covered.
        destination: Used in synthesized descriptions; defaults to the
            plan's own destination.

    Returns:
        RepairedPlan whose days cover every mandatory place.
    """
    recorder = DiagnosticRecorder("coverage", logger)
    meta = read_meta(plan.data)
    destination = destination or meta.destination
    if destination and not meta.destination:
        meta = dataclasses.replace(meta, destination=destination)

    days = list(read_days(plan.data))
    missing = find_missing(days, mandatory)

    if missing and not days:
        recorder.warning("Plan has no days, adding one for must-see places")
        days.append(PlanDay(day_number=1, date=meta.start_date, theme="Must-see highlights"))

    injected_events: List[List[PlanEvent]] = [[] for _ in days]
    for i, place in enumerate(missing):
        target = min(i, len(days) - 1)
        injected_events[target].insert(0, synthesize_event(place, destination or ""))
        recorder.warning(
            "Mandatory place missing from plan, injected",
            place=place.name,
            day_number=days[target].day_number,
        )

    repaired = tuple(
        dataclasses.replace(
            day,
            events=prioritize(tuple(injected) + day.events, mandatory),
        )
        for day, injected in zip(days, injected_events)
    )

    recorder.info(
        "Coverage repaired",
        mandatory=len(mandatory),
        missing=len(missing),
        days=len(repaired),
    )
    return RepairedPlan(
        meta=meta,
        days=repaired,
        injected=tuple(place.name for place in missing),
        diagnostics=plan.diagnostics + recorder.collected(),
    )
