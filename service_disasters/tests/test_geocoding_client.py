"""
Unit tests for the geocoding client.
"""

import httpx
import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_disasters.app.adapters.geocoding_client import GeocodingClient
from service_disasters.app.domain.models import LocationData


def _transport(handler):
    return httpx.MockTransport(handler)


@pytest.mark.asyncio
async def test_openstreetmap_returns_first_match():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["host"] = request.url.host
        seen["params"] = dict(request.url.params)
        seen["user_agent"] = request.headers.get("User-Agent")
        return httpx.Response(200, json=[
            {"lat": "25.3176", "lon": "82.9739", "display_name": "Varanasi"},
            {"lat": "0", "lon": "0"},
        ])

    client = GeocodingClient(user_agent="relief-tests", transport=_transport(handler))

    result = await client.geocode("Varanasi")

    assert result == LocationData(latitude=25.3176, longitude=82.9739)
    assert seen["host"] == "nominatim.openstreetmap.org"
    assert seen["params"] == {"q": "Varanasi", "format": "json", "limit": "1"}
    assert seen["user_agent"] == "relief-tests"
    await client.close()


@pytest.mark.asyncio
async def test_openstreetmap_no_match_returns_none():
    client = GeocodingClient(transport=_transport(lambda request: httpx.Response(200, json=[])))

    assert await client.geocode("Atlantis") is None
    await client.close()


@pytest.mark.asyncio
async def test_http_error_is_converted_to_none():
    client = GeocodingClient(transport=_transport(lambda request: httpx.Response(503, text="busy")))

    assert await client.geocode("Varanasi") is None
    await client.close()


@pytest.mark.asyncio
async def test_transport_error_is_converted_to_none():
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    client = GeocodingClient(transport=_transport(handler))

    assert await client.geocode("Varanasi") is None
    await client.close()


@pytest.mark.asyncio
async def test_google_provider():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.host == "maps.googleapis.com"
        assert request.url.params["key"] == "secret"
        return httpx.Response(200, json={
            "status": "OK",
            "results": [{"geometry": {"location": {"lat": 19.076, "lng": 72.8777}}}],
        })

    client = GeocodingClient("google", api_key="secret", transport=_transport(handler))

    assert await client.geocode("Mumbai") == LocationData(latitude=19.076, longitude=72.8777)
    await client.close()


@pytest.mark.asyncio
async def test_google_zero_results_and_denied_are_none():
    responses = iter([
        httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []}),
        httpx.Response(200, json={"status": "REQUEST_DENIED", "results": []}),
    ])
    client = GeocodingClient("google", api_key="secret", transport=_transport(lambda request: next(responses)))

    assert await client.geocode("Nowhere") is None
    assert await client.geocode("Mumbai") is None
    await client.close()


def test_unknown_provider_rejected():
    with pytest.raises(ValueError):
        GeocodingClient("mapquest")


def test_google_requires_api_key():
    with pytest.raises(ValueError):
        GeocodingClient("google")
