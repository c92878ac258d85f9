"""Engine layer - The four itinerary synthesis stages.

Each stage consumes the previous stage's value and returns a new one:

    recover(text) -> RawPlan
    repair(RawPlan, mandatory) -> RepairedPlan
    await enrich(RepairedPlan, geocoder) -> EnrichedPlan
    normalize(EnrichedPlan) -> ComprehensiveItinerary
"""

from .coverage import names_match, repair
from .enrichment import enrich
from .geo import haversine_km, travel_time_minutes
from .normalizer import normalize
from .recovery import recover

__all__ = [
    "recover",
    "repair",
    "enrich",
    "normalize",
    "names_match",
    "haversine_km",
    "travel_time_minutes",
]
