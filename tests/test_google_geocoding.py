import pytest

from flopmap.core.errors import AccessDeniedError, NotFoundError, QuotaExceededError
from flopmap.vendors import google_geocoding


class DummyResponse:
    def __init__(self, payload):
        self._payload = payload

    def raise_for_status(self):
        pass

    def json(self):
        return self._payload


class DummySession:
    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        return DummyResponse(self.payload)


PARIS_RESULT = {
    "status": "OK",
    "results": [
        {
            "formatted_address": "75001 Paris, France",
            "place_id": "paris-1",
            "geometry": {"location": {"lat": 48.8625, "lng": 2.3364}},
            "address_components": [
                {"long_name": "75001", "short_name": "75001", "types": ["postal_code"]},
                {"long_name": "Paris", "short_name": "Paris", "types": ["locality", "political"]},
                {"long_name": "Île-de-France", "short_name": "IDF", "types": ["administrative_area_level_1"]},
                {"long_name": "France", "short_name": "FR", "types": ["country", "political"]},
            ],
        }
    ],
}


def test_parse_address_components():
    components = google_geocoding.parse_address_components(PARIS_RESULT["results"][0]["address_components"])
    assert components.city == "Paris"
    assert components.country == "France"
    assert components.country_code == "FR"
    assert components.postal_code == "75001"
    assert components.state == "Île-de-France"
    assert components.region is None

    empty = google_geocoding.parse_address_components([])
    assert empty.city is None and empty.country is None


def test_geocode_success():
    session = DummySession(PARIS_RESULT)
    client = google_geocoding.GoogleGeocodingClient("key", session=session)

    result = client.geocode("75001, France")

    assert result.coordinate.lat == 48.8625
    assert result.formatted_address == "75001 Paris, France"
    assert result.components.postal_code == "75001"
    assert result.place_id == "paris-1"
    url, params, timeout = session.calls[0]
    assert "geocode" in url
    assert params["address"] == "75001, France"
    assert timeout == 10


@pytest.mark.parametrize(
    "payload, error",
    [
        ({"status": "OVER_QUERY_LIMIT"}, QuotaExceededError),
        ({"status": "REQUEST_DENIED", "error_message": "invalid key"}, AccessDeniedError),
        ({"status": "ZERO_RESULTS", "results": []}, NotFoundError),
    ],
)
def test_geocode_failures(payload, error):
    client = google_geocoding.GoogleGeocodingClient("key", session=DummySession(payload))
    with pytest.raises(error):
        client.geocode("Nowhere")
