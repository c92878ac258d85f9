"""Itinerary planner service - Main orchestrator.

Validates the trip request, asks the text generator for a plan and
runs the synthesis pipeline over whatever comes back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Union

from ..domain.errors import TravelGenieError, classify_upstream_error
from ..domain.models import PipelineResult, TripRequest
from ..io.trip_request import parse_trip_request
from ..pipeline import synthesize_itinerary
from ..ports.generation import TextGeneratorPort
from ..ports.geocoding import GeocoderPort
from ..prompts import build_itinerary_prompt

RequestLike = Union[TripRequest, Mapping[str, Any]]


@dataclass
class ItineraryPlannerService:
    """Main service for planning itineraries.

    This service orchestrates the full flow:
    1. Request validation
    2. Prompt construction and generation
    3. Recovery, coverage repair, enrichment and normalization

    Attributes:
        generator: Produces the raw plan text
        geocoder: Resolves event addresses
        geocode_concurrency: Maximum in-flight geocoder calls per day
    """

    generator: TextGeneratorPort
    geocoder: GeocoderPort
    geocode_concurrency: int = 1

    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    async def plan(self, request: RequestLike) -> PipelineResult:
        """Plan an itinerary for a trip request.

        Args:
            request: A TripRequest, or the raw request payload.

        Returns:
            PipelineResult with the itinerary and its diagnostics.

        Raises:
            ValidationError: If the request payload is invalid.
            UpstreamError: If the generator fails.
            RecoveryError: If the generated text is unparseable.
        """
        if not isinstance(request, TripRequest):
            request = parse_trip_request(request)

        self._logger.info(
            "Starting itinerary planning",
            extra={
                "destination": request.destination,
                "duration_days": request.duration_days,
                "mandatory_places": len(request.mandatory_places),
            },
        )

        prompt = build_itinerary_prompt(request)
        provider = type(self.generator).__name__
        try:
            raw_text = await self.generator.generate(prompt)
        except TravelGenieError:
            raise
        except Exception as e:
            error = classify_upstream_error(e, provider=provider)
            self._logger.error(
                "Generation failed",
                extra={"provider": provider, "category": error.category, "error": str(e)},
            )
            raise error from e

        self._logger.debug("Plan generated", extra={"text_length": len(raw_text)})

        return await synthesize_itinerary(
            raw_text,
            request.mandatory_places,
            self.geocoder,
            request=request,
            concurrency=self.geocode_concurrency,
        )

    async def plan_safe(
        self, request: RequestLike
    ) -> tuple[Optional[PipelineResult], Optional[Dict[str, Any]]]:
        """Plan an itinerary, returning an error payload instead of raising.

        Returns:
            Tuple of (PipelineResult or None, error payload or None).
        """
        try:
            return await self.plan(request), None
        except TravelGenieError as e:
            self._logger.warning(
                "Itinerary planning failed",
                extra={"kind": e.kind, "status": e.status_code},
            )
            return None, e.to_payload()
        except Exception:
            self._logger.exception("Unexpected error during itinerary planning")
            return None, {
                "error": "Failed to generate itinerary",
                "kind": "internal",
                "status": 500,
            }
