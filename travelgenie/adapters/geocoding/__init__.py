"""Geocoding adapters - Implementations of GeocoderPort.

Available implementations:
- GeopyGeocoderAdapter: Nominatim or Google geocoding through geopy
"""

from .geopy_adapter import GeopyGeocoderAdapter

__all__ = ["GeopyGeocoderAdapter"]
