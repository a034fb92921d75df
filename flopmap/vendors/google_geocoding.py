"""Client for the Google Geocoding API."""

import logging
from typing import Any, Dict, Iterable, Optional

import requests

from flopmap.core.errors import NotFoundError, ProviderError
from flopmap.core.models import AddressComponents, Coordinate, GeocodeResult
from flopmap.vendors.http import build_session, check_status

logger = logging.getLogger(__name__)
_GEOCODE_URL = "https://maps.googleapis.com/maps/api/geocode/json"


def parse_address_components(address_components: Iterable[Dict[str, Any]]) -> AddressComponents:
    city = country = country_code = postal_code = state = region = None
    for component in address_components or []:
        types = set(component.get("types", []))
        if "locality" in types:
            city = component.get("long_name")
        if "country" in types:
            country = component.get("long_name")
            country_code = component.get("short_name")
        if "postal_code" in types:
            postal_code = component.get("long_name")
        if "administrative_area_level_1" in types:
            state = component.get("long_name")
        if "administrative_area_level_2" in types:
            region = component.get("long_name")
    return AddressComponents(
        city=city,
        country=country,
        country_code=country_code,
        postal_code=postal_code,
        state=state,
        region=region,
    )


class GoogleGeocodingClient:
    def __init__(
        self,
        api_key: str,
        *,
        session: Optional[requests.Session] = None,
        timeout: float = 10,
    ) -> None:
        if not api_key:
            raise ValueError("GOOGLE_MAPS_API_KEY is required")
        self._api_key = api_key
        self._session = session or build_session()
        self._timeout = timeout

    def geocode(self, address: str) -> GeocodeResult:
        logger.info("Geocoding address=%s", address)
        response = self._session.get(
            _GEOCODE_URL,
            params={"address": address, "key": self._api_key},
            timeout=self._timeout,
        )
        response.raise_for_status()
        payload = response.json()
        status = check_status(payload, "geocode")
        results = payload.get("results") or []
        if status == "ZERO_RESULTS" or not results:
            raise NotFoundError(f"No geocoding result for {address!r}", status=status)

        result = results[0]
        location = result["geometry"]["location"]
        return GeocodeResult(
            coordinate=Coordinate(float(location["lat"]), float(location["lng"])),
            formatted_address=result.get("formatted_address") or address,
            components=parse_address_components(result.get("address_components", [])),
            place_id=result.get("place_id"),
        )

    def check_connection(self) -> Dict[str, Any]:
        try:
            result = self.geocode("Paris, France")
        except (ProviderError, requests.RequestException) as exc:
            logger.warning("Geocoding connectivity check failed: %s", exc)
            return {"ok": False, "message": str(exc)}
        return {"ok": True, "message": "Geocoding API reachable", "address": result.formatted_address}
