"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the engine to external systems:
- Geocoding services (Nominatim, Google via geopy)
- Generative-text providers (Gemini)
- Caching (in-memory)
"""
