"""Provider interfaces consumed by the search pipeline."""

from __future__ import annotations

from typing import Any, Dict, List, Protocol

from flopmap.core.models import Coordinate, GeocodeResult, PlaceDetails


class Geocoder(Protocol):
    def geocode(self, address: str) -> GeocodeResult:
        """Resolve an address.

        Raises QuotaExceededError, AccessDeniedError or NotFoundError.
        """
        ...


class PlaceSearch(Protocol):
    def nearby(self, coordinate: Coordinate, radius: int, category: str) -> List[Dict[str, Any]]:
        """Return raw nearby-search results for one category."""
        ...

    def details(self, place_id: str) -> PlaceDetails:
        """Return the detail record for a place, raising ProviderError on failure."""
        ...
