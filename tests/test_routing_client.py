from datetime import datetime

import httpx
import pytest

from fieldsim.exceptions import RoutingError
from fieldsim.models.domain import Coordinate
from fieldsim.services.routing.client import AzureMapsClient, check_health

DEPART = datetime(2024, 3, 4, 8, 0, 0)


def _client(handler) -> AzureMapsClient:
    return AzureMapsClient(
        base_url="https://maps.test",
        subscription_key="secret",
        max_retries=0,
        backoff_seconds=0.0,
        transport=httpx.MockTransport(handler),
    )


def test_geocode_returns_first_position():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={"results": [{"position": {"lat": -33.8, "lon": 151.0}}]})

    coordinate = _client(handler).geocode("10 Church St, Parramatta, NSW 2150")

    assert coordinate == Coordinate(-33.8, 151.0)
    assert seen["path"] == "/search/address/json"
    assert seen["params"]["subscription-key"] == "secret"
    assert seen["params"]["query"] == "10 Church St, Parramatta, NSW 2150"


def test_isochrone_parses_boundary():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/route/range/json"
        assert request.url.params["timeBudgetInSec"] == "1800"
        assert request.url.params["query"] == "-33.8,151.0"
        boundary = [
            {"latitude": -33.7, "longitude": 150.9},
            {"latitude": -33.7, "longitude": 151.1},
            {"latitude": -33.9, "longitude": 151.0},
        ]
        return httpx.Response(200, json={"reachableRange": {"center": {}, "boundary": boundary}})

    polygon = _client(handler).isochrone(Coordinate(-33.8, 151.0), 1800, DEPART)

    assert polygon == [Coordinate(-33.7, 150.9), Coordinate(-33.7, 151.1), Coordinate(-33.9, 151.0)]


def test_route_time_reads_summary():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/route/directions/json"
        assert request.url.params["query"] == "-33.81,151.01:-33.8,151.0"
        return httpx.Response(200, json={"routes": [{"summary": {"travelTimeInSeconds": 412}}]})

    seconds = _client(handler).route_time(Coordinate(-33.81, 151.01), Coordinate(-33.8, 151.0), DEPART)
    assert seconds == 412


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, json={"error": "boom"}),
        httpx.Response(200, content=b"not json"),
        httpx.Response(200, json={"results": []}),
    ],
)
def test_geocode_failures_raise_routing_error(response):
    with pytest.raises(RoutingError):
        _client(lambda request: response).geocode("nowhere")


def test_network_error_raises_routing_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(RoutingError):
        _client(handler).route_time(Coordinate(0, 0), Coordinate(1, 1), DEPART)


def test_transport_errors_are_retried_when_configured():
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) < 2:
            return httpx.Response(503)
        return httpx.Response(200, json={"routes": [{"summary": {"travelTimeInSeconds": 90}}]})

    client = AzureMapsClient(
        base_url="https://maps.test",
        subscription_key="secret",
        max_retries=1,
        backoff_seconds=0.0,
        transport=httpx.MockTransport(handler),
    )
    assert client.route_time(Coordinate(0, 0), Coordinate(1, 1), DEPART) == 90
    assert len(attempts) == 2


def test_missing_subscription_key_is_rejected(monkeypatch):
    from fieldsim.services.routing import client as client_module

    monkeypatch.setattr(client_module.settings, "routing_subscription_key", None)
    with pytest.raises(ValueError):
        AzureMapsClient(base_url="https://maps.test")


def test_check_health_reports_failures():
    assert check_health(_client(lambda request: httpx.Response(500))) is False
    ok = _client(lambda request: httpx.Response(200, json={"results": [{"position": {"lat": 1, "lon": 2}}]}))
    assert check_health(ok) is True
