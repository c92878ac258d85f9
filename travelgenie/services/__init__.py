"""Application services orchestrating ports and the engine."""

from .itinerary_queries import day_overview, day_schedule, get_day, itinerary_summary
from .planner import ItineraryPlannerService

__all__ = [
    "ItineraryPlannerService",
    "day_overview",
    "day_schedule",
    "get_day",
    "itinerary_summary",
]
