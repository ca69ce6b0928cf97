# wipercheck/services/journey_service.py

from datetime import datetime, timezone
from time import perf_counter
from typing import Optional, Protocol

from wipercheck.core.context import ServiceContext
from wipercheck.core.errors import ProviderError, UpstreamFailureError
from wipercheck.models.journey import JourneyResponse, Route, Trip
from wipercheck.services.coordinate_resolver import CoordinateResolver
from wipercheck.services.response_builder import ResponseBuilder
from wipercheck.services.route_sampler import sample_route
from wipercheck.services.weather_resolver import WeatherResolver


class RoutingProvider(Protocol):
    async def route(self, trip: Trip) -> Route: ...


class JourneyService:
    """
    High-level journey pipeline:
    - geocodes both trip endpoints
    - routes between them
    - samples points along the route
    - attaches forecasts to the sampled points
    - filters, locates and summarises the result
    """

    def __init__(
        self,
        ctx: ServiceContext,
        coordinates: CoordinateResolver,
        routing: RoutingProvider,
        weather: WeatherResolver,
        responses: ResponseBuilder,
    ) -> None:
        self.ctx = ctx
        self.coordinates = coordinates
        self.routing = routing
        self.weather = weather
        self.responses = responses
        self.log = ctx.logger_for("journey_service")

    async def journey(
        self,
        origin: str,
        destination: str,
        min_pop: float = 0.0,
        delay_minutes: int = 0,
        now: Optional[datetime] = None,
    ) -> JourneyResponse:
        """
        Main entry point for the /journey endpoint.

        `min_pop` is a 0.0-1.0 probability, `delay_minutes` shifts the
        departure time. Client and upstream errors propagate as
        WiperCheckError subclasses.
        """
        t0 = perf_counter()
        now = now or datetime.now(timezone.utc)

        self.log.info(f"Received journey request '{origin}' -> '{destination}'")

        # 1) Endpoints
        trip = await self.coordinates.resolve(origin, destination)

        # 2) Route
        route = await self._route(trip, origin, destination)

        # 3) Sample points along the route
        sampled = sample_route(route.steps, route.duration)
        self.log.info(
            f"Sampled {len(sampled)} of {len(route.steps)} route steps "
            f"(duration={route.duration:.0f} s)"
        )

        # 4) Forecasts
        resolved = await self.weather.resolve(sampled, delay_minutes, now)

        # 5) Filter, locate, summarise
        detailed, summary = await self.responses.build(resolved, min_pop)

        t1 = perf_counter()
        self.log.info(
            f"Journey built: {len(detailed)} steps, {len(summary)} summary entries "
            f"in {(t1 - t0) * 1000.0:.2f} ms"
        )
        return JourneyResponse(summary=summary, detailed_steps=detailed)

    async def _route(self, trip: Trip, origin: str, destination: str) -> Route:
        try:
            return await self.routing.route(trip)
        except ProviderError as exc:
            self.log.bind(origin=origin, destination=destination, action="Route").error(
                "Routing failed: {}", exc
            )
            raise UpstreamFailureError("Internal error retrieving trip route.") from exc
