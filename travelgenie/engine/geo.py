"""Great-circle distance and the coarse travel-time heuristic.

No live routing is involved: travel time is a piecewise function of
straight-line distance, walking below 1 km, mixed transit up to 5 km
and longer transit beyond.
"""

from __future__ import annotations

import math

from ..domain.models import GeoLocation

EARTH_RADIUS_KM = 6371.0

WALKING_MIN_PER_KM = 12
TRANSIT_MIN_PER_KM = 5
TRANSIT_OVERHEAD_MIN = 10
LONG_TRANSIT_MIN_PER_KM = 3
LONG_TRANSIT_OVERHEAD_MIN = 20


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in km, rounded to 2 decimals."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lam = math.radians(lon2 - lon1)
    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lam / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return round(EARTH_RADIUS_KM * c, 2)


def distance_between(origin: GeoLocation, target: GeoLocation) -> float:
    return haversine_km(origin.latitude, origin.longitude, target.latitude, target.longitude)


def travel_time_minutes(distance_km: float) -> int:
    """Estimated minutes to cover ``distance_km``; non-decreasing in distance."""
    if distance_km < 0:
        raise ValueError(f"Distance must be non-negative, got {distance_km}")
    if distance_km <= 1:
        return math.ceil(distance_km * WALKING_MIN_PER_KM)
    if distance_km <= 5:
        return math.ceil(distance_km * TRANSIT_MIN_PER_KM + TRANSIT_OVERHEAD_MIN)
    return math.ceil(distance_km * LONG_TRANSIT_MIN_PER_KM + LONG_TRANSIT_OVERHEAD_MIN)
