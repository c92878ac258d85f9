"""Geospatial enrichment: coordinates and inter-event travel metrics.

Events lacking coordinates (absent or the 0,0 sentinel) are resolved
through the geocoder port. A failed lookup degrades the event to 0,0
and is recorded as a warning; it never aborts the pipeline.

Events of a day are put in chronological order first, so the metrics
on each event describe the trip to the event that actually follows it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

from ..diagnostics import DiagnosticRecorder
from ..domain.errors import GeocodingError
from ..domain.models import (
    EnrichedDay,
    EnrichedEvent,
    EnrichedPlan,
    GeoLocation,
    PlanDay,
    PlanEvent,
    RepairedPlan,
)
from ..ports.geocoding import GeocoderPort
from .geo import distance_between, travel_time_minutes
from .tree import time_to_minutes

logger = logging.getLogger(__name__)

_Located = Tuple[PlanEvent, GeoLocation, bool]


def chronological(events: Sequence[PlanEvent]) -> tuple[PlanEvent, ...]:
    """Stable sort by start time; events without a readable time go last."""

    def key(event: PlanEvent) -> Tuple[int, int]:
        minutes = time_to_minutes(event.start_time)
        return (0, minutes) if minutes is not None else (1, 0)

    return tuple(sorted(events, key=key))


def _geocode_query(event: PlanEvent, destination: str) -> str:
    if event.address:
        return event.address
    return ", ".join(part for part in (event.name, destination) if part)


async def _locate(
    event: PlanEvent,
    geocoder: GeocoderPort,
    destination: str,
    recorder: DiagnosticRecorder,
) -> _Located:
    if event.coordinates is not None and not event.coordinates.is_zero:
        return event, event.coordinates, False

    query = _geocode_query(event, destination)
    if not query:
        recorder.warning("Event has nothing to geocode, using placeholder coordinates", event=event.name)
        return event, GeoLocation.unknown(), True

    try:
        location: Optional[GeoLocation] = await geocoder.resolve(query)
    except GeocodingError as exc:
        recorder.warning(
            "Geocoding failed, using placeholder coordinates",
            event=event.name,
            query=query,
            error=str(exc),
            rate_limited=exc.is_rate_limited,
        )
        return event, GeoLocation.unknown(), True

    if location is None:
        recorder.warning(
            "Address not found, using placeholder coordinates",
            event=event.name,
            query=query,
        )
        return event, GeoLocation.unknown(), True

    recorder.debug("Event geocoded", event=event.name, query=query)
    return event, location, False


async def _locate_day(
    events: Sequence[PlanEvent],
    geocoder: GeocoderPort,
    destination: str,
    recorder: DiagnosticRecorder,
    concurrency: int,
) -> List[_Located]:
    if concurrency <= 1:
        return [await _locate(e, geocoder, destination, recorder) for e in events]

    semaphore = asyncio.Semaphore(concurrency)

    async def bounded(event: PlanEvent) -> _Located:
        async with semaphore:
            return await _locate(event, geocoder, destination, recorder)

    tasks = [asyncio.ensure_future(bounded(e)) for e in events]
    try:
        # gather keeps input order, so the day's order stays deterministic
        return list(await asyncio.gather(*tasks))
    finally:
        for task in tasks:
            if not task.done():
                task.cancel()


def _with_metrics(located: Sequence[_Located]) -> tuple[EnrichedEvent, ...]:
    enriched = []
    for index, (event, coordinates, failed) in enumerate(located):
        travel_time = distance = None
        if index + 1 < len(located):
            _, next_coordinates, _ = located[index + 1]
            distance = distance_between(coordinates, next_coordinates)
            travel_time = travel_time_minutes(distance)
        enriched.append(
            EnrichedEvent(
                event=event,
                coordinates=coordinates,
                travel_time_to_next_minutes=travel_time,
                travel_distance_to_next_km=distance,
                geocode_failed=failed,
            )
        )
    return tuple(enriched)


async def enrich_day(
    day: PlanDay,
    geocoder: GeocoderPort,
    destination: str = "",
    *,
    concurrency: int = 1,
    recorder: Optional[DiagnosticRecorder] = None,
) -> EnrichedDay:
    recorder = recorder or DiagnosticRecorder("enrichment", logger)
    ordered = chronological(day.events)
    located = await _locate_day(ordered, geocoder, destination, recorder, concurrency)
    return EnrichedDay(
        day_number=day.day_number,
        date=day.date,
        theme=day.theme,
        events=_with_metrics(located),
        budget_breakdown=day.budget_breakdown,
    )


async def enrich(
    plan: RepairedPlan,
    geocoder: GeocoderPort,
    *,
    concurrency: int = 1,
) -> EnrichedPlan:
    """Resolve missing coordinates and compute travel metrics.

    Days are processed in order. With ``concurrency`` 1 (the default)
    geocoder calls are awaited one at a time; a higher value fans the
    calls of one day out under a semaphore.

    Args:
        plan: Coverage-repaired plan.
        geocoder: Port resolving an address to coordinates.
        concurrency: Maximum in-flight geocoder calls per day.

    Returns:
        EnrichedPlan in which every event has coordinates.
    """
    recorder = DiagnosticRecorder("enrichment", logger)
    destination = plan.meta.destination

    days = []
    for day in plan.days:
        days.append(
            await enrich_day(
                day, geocoder, destination, concurrency=concurrency, recorder=recorder
            )
        )

    failed = sum(1 for day in days for e in day.events if e.geocode_failed)
    recorder.info(
        "Plan enriched",
        days=len(days),
        events=sum(len(day.events) for day in days),
        degraded=failed,
    )
    return EnrichedPlan(
        meta=plan.meta,
        days=tuple(days),
        diagnostics=plan.diagnostics + recorder.collected(),
    )
