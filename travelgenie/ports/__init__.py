"""Ports layer - Abstract interfaces (Protocols) for the application.

Ports define the contracts between the engine and the external
collaborators it drives: the generative-text provider, the geocoder
and the cache behind it.
"""

from .cache import CachePort
from .generation import TextGeneratorPort
from .geocoding import GeocoderPort

__all__ = [
    "GeocoderPort",
    "TextGeneratorPort",
    "CachePort",
]
