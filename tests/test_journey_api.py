# tests/test_journey_api.py
"""
End-to-end tests for GET /journey with fake providers wired into a real
JourneyService.
"""
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from conftest import make_weather
from wipercheck.api.v1.routes_journey import parse_journey_params
from wipercheck.core.errors import ProviderError
from wipercheck.main import create_app
from wipercheck.models.journey import Coordinates, GeocodeResult, Location, Route, RouteStep
from wipercheck.services.coordinate_resolver import CoordinateResolver
from wipercheck.services.journey_service import JourneyService
from wipercheck.services.response_builder import ResponseBuilder
from wipercheck.services.weather_resolver import WeatherResolver

PLACES = {
    "Milan": Coordinates(latitude=45.4642, longitude=9.19),
    "Bologna": Coordinates(latitude=44.4949, longitude=11.3426),
}


def _route():
    # 8 steps of 15 minutes: 7200 s total, sampled every 600 s
    return Route(
        steps=[
            RouteStep(
                name="A1" if i % 3 == 0 else "",
                step_duration=900,
                coordinates=Coordinates(latitude=45.4 - i * 0.1, longitude=9.2 + i * 0.25),
            )
            for i in range(8)
        ],
        duration=7200,
    )


class Providers:
    def __init__(self):
        self.geocoder = AsyncMock()
        self.geocoder.forward = AsyncMock(side_effect=self._forward)
        self.geocoder.reverse = AsyncMock(
            return_value=[Location(locality="Parma", region="Emilia-Romagna")]
        )
        self.routing = AsyncMock()
        self.routing.route = AsyncMock(return_value=_route())
        self.forecasts = AsyncMock()
        self.forecasts.hourly_forecast = AsyncMock(side_effect=self._forecast)
        self.cache = AsyncMock()
        self.cache.nearest = AsyncMock(return_value=None)

    @staticmethod
    async def _forward(address):
        if address not in PLACES:
            return []
        return [GeocodeResult(coordinates=PLACES[address], label=address)]

    @staticmethod
    async def _forecast(coordinates, hour):
        # rain picks up going south-east
        pop = 0.2 if coordinates.longitude < 10.0 else 0.7
        return make_weather(pop, "moderate rain")

    def upstream_calls(self):
        return (
            self.geocoder.forward.await_count
            + self.geocoder.reverse.await_count
            + self.routing.route.await_count
            + self.forecasts.hourly_forecast.await_count
            + self.cache.nearest.await_count
        )


@pytest.fixture
def providers():
    return Providers()


@pytest.fixture
def client(ctx, settings, providers):
    service = JourneyService(
        ctx,
        coordinates=CoordinateResolver(ctx, providers.geocoder),
        routing=providers.routing,
        weather=WeatherResolver(ctx, providers.forecasts, providers.cache),
        responses=ResponseBuilder(ctx, providers.geocoder),
    )
    return TestClient(create_app(settings=settings, journey_service=service))


def test_journey_returns_summary_and_details(client, providers):
    response = client.get("/journey", params={"from": "Milan", "to": "Bologna"})

    assert response.status_code == 200
    data = response.json()
    assert data["error"] is None

    steps = data["detailedSteps"]
    assert len(steps) > 0
    totals = [s["totalDuration"] for s in steps]
    assert totals == sorted(totals)
    assert all(s["hourlyWeather"] is not None for s in steps)
    assert all(s["name"] == "A1" for s in steps)
    assert steps[0]["location"]["locality"] == "Parma"

    assert [s["pop"] for s in data["summary"]] == [20, 70]
    assert data["summary"][0] == {
        "location": "Parma, Emilia-Romagna",
        "conditions": "Moderate rain",
        "pop": 20,
    }
    providers.routing.route.assert_awaited_once()


def test_min_pop_filters_details(client):
    response = client.get(
        "/journey", params={"from": "Milan", "to": "Bologna", "minPop": "50"}
    )

    assert response.status_code == 200
    data = response.json()
    assert all(s["hourlyWeather"]["pop"] >= 0.5 for s in data["detailedSteps"])
    assert [s["pop"] for s in data["summary"]] == [70]


def test_unknown_origin_is_400_without_routing(client, providers):
    response = client.get("/journey", params={"from": "Atlantis", "to": "Bologna"})

    assert response.status_code == 400
    assert "Atlantis" in response.json()["error"]
    providers.routing.route.assert_not_called()


def test_routing_failure_is_generic_500(client, providers):
    providers.routing.route = AsyncMock(
        side_effect=ProviderError("osrm", "error code 503 returned")
    )

    response = client.get("/journey", params={"from": "Milan", "to": "Bologna"})

    assert response.status_code == 500
    error = response.json()["error"]
    assert error == "Internal error retrieving trip route."
    assert "503" not in error


def test_forecast_outage_degrades_to_empty_result(client, providers):
    providers.forecasts.hourly_forecast = AsyncMock(
        side_effect=ProviderError("openweather", "down")
    )

    response = client.get("/journey", params={"from": "Milan", "to": "Bologna"})

    assert response.status_code == 200
    assert response.json()["detailedSteps"] == []
    assert response.json()["summary"] == []


@pytest.mark.parametrize(
    "params, message",
    [
        ({"to": "Bologna"}, "Missing 'from'"),
        ({"from": "", "to": "Bologna"}, "Missing 'from'"),
        ({"from": "Milan"}, "Missing 'to'"),
        ({"from": "Milan", "to": "Bologna", "delay": "721"}, "'delay'"),
        ({"from": "Milan", "to": "Bologna", "delay": "-5"}, "'delay'"),
        ({"from": "Milan", "to": "Bologna", "delay": "soon"}, "'delay'"),
        ({"from": "Milan", "to": "Bologna", "minPop": "101"}, "'minPop'"),
        ({"from": "Milan", "to": "Bologna", "minPop": "lots"}, "'minPop'"),
    ],
)
def test_bad_request_makes_no_upstream_calls(client, providers, params, message):
    response = client.get("/journey", params=params)

    assert response.status_code == 400
    assert message in response.json()["error"]
    assert providers.upstream_calls() == 0


def test_max_delay_is_accepted(client):
    response = client.get(
        "/journey", params={"from": "Milan", "to": "Bologna", "delay": "720"}
    )
    assert response.status_code == 200


def test_query_params_are_normalised():
    assert parse_journey_params("Milan", "Bologna", "45", "30") == ("Milan", "Bologna", 0.45, 30)
    assert parse_journey_params("Milan", "Bologna", "", None) == ("Milan", "Bologna", 0.0, 0)
