import pytest
import requests

from aitinerary.core import geo_service, image_search_service
from aitinerary.core.geo_service import GeoService
from aitinerary.core.image_search_service import ImageSearchService


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


@pytest.fixture
def fake_get(monkeypatch):
    """Route requests.get to canned payloads keyed by URL."""
    calls = []
    payloads = {}

    def _get(url, params=None, timeout=None):
        calls.append((url, params))
        payload = payloads.get(url)
        if isinstance(payload, Exception):
            raise payload
        return payload

    monkeypatch.setattr(requests, "get", _get)
    return payloads, calls


def test_get_address_uses_find_place(fake_get):
    payloads, calls = fake_get
    payloads[geo_service.FIND_PLACE_URL] = FakeResponse(
        {"status": "OK", "candidates": [{"formatted_address": "Rue de Rivoli, 75001 Paris"}]}
    )

    address = GeoService("maps-key").get_address("Louvre, Paris")

    assert address == "Rue de Rivoli, 75001 Paris"
    url, params = calls[0]
    assert params["input"] == "Louvre, Paris"
    assert params["key"] == "maps-key"


def test_get_coordinates_uses_geocoding(fake_get):
    payloads, _ = fake_get
    payloads[geo_service.GEOCODE_URL] = FakeResponse(
        {"status": "OK", "results": [{"geometry": {"location": {"lat": 48.86, "lng": 2.33}}}]}
    )

    coords = GeoService("maps-key").get_coordinates("Louvre, Paris")

    assert (coords.lat, coords.lng) == (48.86, 2.33)


@pytest.mark.parametrize(
    "response",
    [
        FakeResponse({"status": "ZERO_RESULTS", "results": []}),
        FakeResponse({}, status_code=500),
        requests.ConnectionError("offline"),
        FakeResponse({"status": "OK", "results": [{"geometry": {}}]}),
    ],
)
def test_geocode_failures_return_none(fake_get, response):
    payloads, _ = fake_get
    payloads[geo_service.GEOCODE_URL] = response

    assert GeoService("maps-key").get_coordinates("Nowhere") is None


def test_geo_without_key_makes_no_requests(fake_get):
    _, calls = fake_get
    service = GeoService("")

    assert service.get_address("Louvre") is None
    assert service.get_coordinates("Louvre") is None
    assert calls == []


def test_image_search_returns_first_link(fake_get):
    payloads, calls = fake_get
    payloads[image_search_service.CUSTOM_SEARCH_URL] = FakeResponse(
        {"items": [{"link": "https://img/1.jpg"}, {"link": "https://img/2.jpg"}]}
    )

    assert ImageSearchService("key", "cx").search("Louvre, Paris") == "https://img/1.jpg"
    params = calls[0][1]
    assert params["searchType"] == "image"
    assert params["q"] == "Louvre, Paris"
    assert params["cx"] == "cx"


def test_image_search_failures_return_none(fake_get):
    payloads, _ = fake_get
    service = ImageSearchService("key", "cx")

    payloads[image_search_service.CUSTOM_SEARCH_URL] = FakeResponse({})
    assert service.search("Louvre") is None

    payloads[image_search_service.CUSTOM_SEARCH_URL] = requests.Timeout("slow")
    assert service.search("Louvre") is None

    assert ImageSearchService("", "").search("Louvre") is None
