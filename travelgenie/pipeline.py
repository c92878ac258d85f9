"""Itinerary synthesis pipeline.

Chains the four engine stages over one generated payload:

    raw text -> recover -> repair -> enrich -> normalize

Every stage returns a new immutable value carrying the diagnostics
accumulated so far; the final PipelineResult carries all of them.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from .domain.models import MandatoryPlace, PipelineResult, TripRequest
from .engine import enrich, normalize, recover, repair
from .ports.geocoding import GeocoderPort

logger = logging.getLogger(__name__)


async def synthesize_itinerary(
    raw_text: str,
    mandatory: Sequence[MandatoryPlace],
    geocoder: GeocoderPort,
    *,
    request: Optional[TripRequest] = None,
    destination: Optional[str] = None,
    concurrency: int = 1,
) -> PipelineResult:
    """Turn generated text into a canonical itinerary.

    Args:
        raw_text: The generator's output.
        mandatory: Places the itinerary must contain.
        geocoder: Port used to resolve missing coordinates.
        request: The originating request; fills in dates and preferences.
        destination: Overrides the destination used in synthesized
            events and geocoding queries.
        concurrency: Maximum in-flight geocoder calls per day.

    Returns:
        PipelineResult with the itinerary and every stage's diagnostics.

    Raises:
        RecoveryError: If the text holds no recoverable JSON object.
    """
    destination = destination or (request.destination if request else None)

    raw = recover(raw_text)
    repaired = repair(raw, mandatory, destination)
    enriched = await enrich(repaired, geocoder, concurrency=concurrency)
    itinerary = normalize(enriched, request)

    logger.info(
        "Itinerary synthesized",
        extra={
            "itinerary_id": itinerary.id,
            "recovery_tier": raw.tier.value,
            "injected": len(repaired.injected),
            "diagnostic_count": len(enriched.diagnostics),
        },
    )
    return PipelineResult(itinerary=itinerary, diagnostics=enriched.diagnostics)
