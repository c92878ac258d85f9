"""TravelGenie itinerary engine.

Turns the approximately-JSON output of a generative-text provider into
a canonical, coverage-guaranteed, geospatially enriched itinerary.
"""

from .domain.errors import TravelGenieError
from .domain.models import ComprehensiveItinerary, MandatoryPlace, PipelineResult, TripRequest
from .pipeline import synthesize_itinerary

__all__ = [
    "ComprehensiveItinerary",
    "MandatoryPlace",
    "PipelineResult",
    "TravelGenieError",
    "TripRequest",
    "synthesize_itinerary",
]
