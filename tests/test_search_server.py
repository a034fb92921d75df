import pytest

from flopmap.core.models import Coordinate, LocationQuery, SearchFailure, SearchResult
from flopmap.core.pipeline import SearchStack
from flopmap.jobs import search_server


class DummyService:
    def __init__(self, outcome):
        self.outcome = outcome
        self.calls = []

    def search(self, query, radius=None, max_results=None, categories=None):
        self.calls.append(dict(query=query, radius=radius, max_results=max_results, categories=categories))
        return self.outcome


class DummyClient:
    def __init__(self, ok=True):
        self.ok = ok

    def photo_url(self, reference, max_width=400):
        return f"https://photos/{reference}?w={max_width}"

    def check_connection(self):
        return {"ok": self.ok, "message": "probe"}


def _result():
    location = LocationQuery(
        original="48.8566, 2.3522",
        kind="coordinates",
        coordinate=Coordinate(48.8566, 2.3522),
        formatted_address="48.8566, 2.3522",
    )
    return SearchResult(location=location, places=[], total_found=0, radius=2000, max_results=5, categories=["bar"])


def _client(outcome=None, places_ok=True):
    service = DummyService(outcome if outcome is not None else _result())
    stack = SearchStack(service=service, places=DummyClient(places_ok), geocoder=DummyClient())
    return search_server.create_app(stack).test_client(), service


def test_root_and_health_endpoints():
    client, _ = _client()
    assert client.get("/").status_code == 200
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_provider_health(monkeypatch):
    client, _ = _client()
    response = client.get("/healthz/providers")
    assert response.status_code == 200
    assert response.get_json()["checks"]["places"]["ok"] is True

    degraded, _ = _client(places_ok=False)
    response = degraded.get("/healthz/providers")
    assert response.status_code == 503
    assert response.get_json()["status"] == "degraded"


def test_search_passes_parameters_and_returns_payload():
    client, service = _client()

    response = client.post(
        "/search",
        json={"query": "48.8566, 2.3522", "radius": 2000, "maxResults": 5, "placeTypes": ["bar"]},
    )

    assert response.status_code == 200
    body = response.get_json()
    assert body["success"] is True
    assert body["results"]["displayCount"] == 0
    assert body["searchQuery"]["type"] == "coordinates"
    assert service.calls == [
        {"query": "48.8566, 2.3522", "radius": 2000, "max_results": 5, "categories": ["bar"]}
    ]


@pytest.mark.parametrize(
    "kind, status",
    [
        ("InvalidInput", 400),
        ("LocationNotResolved", 400),
        ("ProviderQuotaExceeded", 429),
        ("ProviderUnavailable", 503),
        ("InternalError", 500),
    ],
)
def test_search_failure_status_codes(kind, status):
    client, _ = _client(SearchFailure(kind=kind, message="nope", suggestions=["essayez"]))

    response = client.post("/search", json={"query": "x"})

    assert response.status_code == status
    body = response.get_json()
    assert body["success"] is False
    assert body["kind"] == kind
    assert body["suggestions"] == ["essayez"]


def test_search_rejects_non_object_body():
    client, service = _client()

    response = client.post("/search", json=["Paris"])

    assert response.status_code == 400
    body = response.get_json()
    assert body["success"] is False
    assert body["kind"] == "InvalidInput"
    assert body["details"] == ["Le corps de la requête doit être un objet JSON"]
    assert service.calls == []


def test_search_without_api_key_is_configuration_error(monkeypatch):
    def fail(settings):
        raise RuntimeError("GOOGLE_MAPS_API_KEY is required")

    monkeypatch.setattr(search_server, "build_search_service", fail)
    client = search_server.create_app().test_client()

    response = client.post("/search", json={"query": "Paris"})

    assert response.status_code == 500
    assert response.get_json()["kind"] == "InternalError"


def test_suggestions_endpoint():
    client, _ = _client()
    response = client.get("/search/suggestions?query=ly")
    assert response.status_code == 200
    assert response.get_json()["suggestions"] == ["Lyon, France"]
