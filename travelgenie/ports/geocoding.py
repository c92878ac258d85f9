"""Geocoding port - Abstraction for address resolution.

This protocol defines the contract for geocoding services, allowing
different implementations (Nominatim, Google, test fakes) to be used
by the enricher.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Protocol

if TYPE_CHECKING:
    from ..domain.models import GeoLocation


class GeocoderPort(Protocol):
    """Port for geocoding services.

    Implementation: adapters/geocoding/geopy_adapter.py
    """

    async def resolve(self, address: str) -> Optional[GeoLocation]:
        """Resolve a free-text address to coordinates.

        Args:
            address: Street address or "place, city" query.

        Returns:
            Coordinates, or None if the address was not found.

        Raises:
            GeocodingError: If the service is unreachable or rate limited.
        """
        ...
