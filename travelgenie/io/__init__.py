"""Input/output helpers for the itinerary engine.

This subpackage turns caller payloads into validated domain requests.
"""

from .trip_request import parse_date, parse_mandatory_places, parse_trip_request

__all__ = ["parse_trip_request", "parse_mandatory_places", "parse_date"]
