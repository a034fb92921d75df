import pytest
import requests

from flopmap.core.errors import AccessDeniedError, NotFoundError, ProviderError, QuotaExceededError
from flopmap.core.models import Coordinate
from flopmap.vendors import google_places


class DummyResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload or {}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError("http error")

    def json(self):
        return self._payload


class DummySession:
    def __init__(self, response=None):
        self.calls = []
        self.response = response

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, params, timeout))
        return self.response


@pytest.fixture
def session():
    return DummySession()


@pytest.fixture
def client(session):
    return google_places.GooglePlacesClient("key", session=session, timeout=7, language="fr")


def test_client_requires_api_key():
    with pytest.raises(ValueError):
        google_places.GooglePlacesClient("")


def test_nearby_success(client, session):
    session.response = DummyResponse(
        payload={"status": "OK", "results": [{"place_id": "a", "name": "Chez Nous"}]}
    )

    results = client.nearby(Coordinate(48.85, 2.35), 2000, "restaurant")

    assert results == [{"place_id": "a", "name": "Chez Nous"}]
    url, params, timeout = session.calls[0]
    assert "nearbysearch" in url
    assert params["location"] == "48.85,2.35"
    assert params["radius"] == 2000
    assert params["type"] == "restaurant"
    assert params["key"] == "key"
    assert timeout == 7


def test_nearby_zero_results_is_empty(client, session):
    session.response = DummyResponse(payload={"status": "ZERO_RESULTS", "results": []})
    assert client.nearby(Coordinate(0, 0), 100, "bar") == []


@pytest.mark.parametrize(
    "status, error",
    [
        ("OVER_QUERY_LIMIT", QuotaExceededError),
        ("REQUEST_DENIED", AccessDeniedError),
        ("INVALID_REQUEST", ProviderError),
    ],
)
def test_nearby_error_status(client, session, status, error):
    session.response = DummyResponse(payload={"status": status, "error_message": "bad"})
    with pytest.raises(error) as excinfo:
        client.nearby(Coordinate(0, 0), 100, "bar")
    assert excinfo.value.status == status


def test_nearby_http_error(client, session):
    session.response = DummyResponse(status_code=500)
    with pytest.raises(requests.HTTPError):
        client.nearby(Coordinate(0, 0), 100, "bar")


def test_details_success(client, session):
    session.response = DummyResponse(
        payload={
            "status": "OK",
            "result": {
                "place_id": "pid",
                "name": "Acme",
                "rating": 1.8,
                "user_ratings_total": 42,
                "formatted_address": "1 rue de Rivoli",
                "geometry": {"location": {"lat": 48.86, "lng": 2.34}},
                "reviews": [{"rating": 1, "text": "Nul", "time": 1700000000}],
                "opening_hours": {"open_now": False},
                "price_level": 2,
            },
        }
    )

    details = client.details("pid")

    assert details.name == "Acme"
    assert details.rating == 1.8
    assert details.review_count == 42
    assert details.coordinate == Coordinate(48.86, 2.34)
    assert details.reviews[0].stars == 1
    assert details.open_now is False
    assert details.price_level == 2
    _, params, _ = session.calls[0]
    assert params["language"] == "fr"
    assert "reviews" in params["fields"]


def test_details_not_found(client, session):
    session.response = DummyResponse(payload={"status": "NOT_FOUND"})
    with pytest.raises(NotFoundError):
        client.details("pid")


def test_details_quota(client, session):
    session.response = DummyResponse(payload={"status": "OVER_QUERY_LIMIT", "error_message": "limit"})
    with pytest.raises(QuotaExceededError):
        client.details("pid")


def test_photo_url(client):
    url = client.photo_url("ref123", 150)
    assert "maxwidth=150" in url
    assert "photoreference=ref123" in url


def test_check_connection_reports_failure(client, session):
    session.response = DummyResponse(payload={"status": "REQUEST_DENIED", "error_message": "bad key"})
    result = client.check_connection()
    assert result["ok"] is False
    assert "bad key" in result["message"]
