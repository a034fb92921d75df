"""Client utilities for the Google Places API."""

import logging
from typing import Any, Dict, List, Optional

import requests

from flopmap.core.errors import NotFoundError, ProviderError
from flopmap.core.models import Coordinate, PlaceDetails
from flopmap.vendors.http import build_session, check_status

logger = logging.getLogger(__name__)
_BASE_URL = "https://maps.googleapis.com/maps/api/place"

DETAIL_FIELDS = ",".join(
    [
        "place_id",
        "name",
        "rating",
        "user_ratings_total",
        "reviews",
        "formatted_address",
        "geometry",
        "photos",
        "website",
        "formatted_phone_number",
        "opening_hours",
        "price_level",
        "types",
    ]
)


class GooglePlacesClient:
    """Nearby search, place details and photo URLs over the Places web service."""

    def __init__(
        self,
        api_key: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
        language: str = "fr",
    ) -> None:
        if not api_key:
            raise ValueError("GOOGLE_MAPS_API_KEY is required")
        self._api_key = api_key
        self._session = session or build_session()
        self._timeout = timeout
        self._language = language

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        params = {**params, "key": self._api_key}
        response = self._session.get(f"{_BASE_URL}/{endpoint}/json", params=params, timeout=self._timeout)
        response.raise_for_status()
        return response.json()

    def nearby(self, coordinate: Coordinate, radius: int, category: str) -> List[Dict[str, Any]]:
        params = {
            "location": f"{coordinate.lat},{coordinate.lng}",
            "radius": radius,
            "type": category,
        }
        payload = self._get("nearbysearch", params)
        check_status(payload, "nearby_search")
        return list(payload.get("results") or [])

    def details(self, place_id: str) -> PlaceDetails:
        params = {"place_id": place_id, "fields": DETAIL_FIELDS, "language": self._language}
        payload = self._get("details", params)
        status = check_status(payload, "place_details")
        result = payload.get("result")
        if status == "ZERO_RESULTS" or not result:
            raise NotFoundError(f"No details for {place_id}", status=status)
        return PlaceDetails.from_api(place_id, result)

    def photo_url(self, reference: str, max_width: int = 400) -> str:
        return f"{_BASE_URL}/photo?maxwidth={max_width}&photoreference={reference}&key={self._api_key}"

    def check_connection(self) -> Dict[str, Any]:
        """Probe the API with a small nearby search around Paris."""
        try:
            results = self.nearby(Coordinate(48.8566, 2.3522), 1000, "restaurant")
        except (ProviderError, requests.RequestException) as exc:
            logger.warning("Places connectivity check failed: %s", exc)
            return {"ok": False, "message": str(exc)}
        return {"ok": True, "message": "Places API reachable", "results": len(results)}
