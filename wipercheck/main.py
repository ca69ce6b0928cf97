# wipercheck/main.py

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from redis.asyncio import Redis

from wipercheck.api.v1 import routes_health, routes_journey
from wipercheck.clients.openweather import OpenWeatherClient
from wipercheck.clients.osrm import OSRMClient
from wipercheck.clients.positionstack import PositionstackClient
from wipercheck.clients.weather_cache import GeoWeatherCache
from wipercheck.core.config import Settings, settings as default_settings
from wipercheck.core.context import ServiceContext
from wipercheck.core.errors import WiperCheckError
from wipercheck.core.logger import logger
from wipercheck.core.logging_config import setup_logging
from wipercheck.models.journey import JourneyResponse
from wipercheck.services.coordinate_resolver import CoordinateResolver
from wipercheck.services.journey_service import JourneyService
from wipercheck.services.response_builder import ResponseBuilder
from wipercheck.services.weather_resolver import WeatherResolver


def build_journey_service(
    ctx: ServiceContext,
    http: httpx.AsyncClient,
    cache: Optional[GeoWeatherCache] = None,
) -> JourneyService:
    """
    Wire the provider adapters and pipeline components together.
    """
    s = ctx.settings
    geocoder = PositionstackClient(
        http, s.POSITIONSTACK_API_KEY, s.POSITIONSTACK_BASE_URL, s.HTTP_MAX_RETRIES
    )
    routing = OSRMClient(http, s.OSRM_BASE_URL, s.HTTP_MAX_RETRIES)
    forecasts = OpenWeatherClient(
        http, s.OPENWEATHER_API_KEY, s.OPENWEATHER_BASE_URL, s.HTTP_MAX_RETRIES
    )

    return JourneyService(
        ctx,
        coordinates=CoordinateResolver(ctx, geocoder),
        routing=routing,
        weather=WeatherResolver(ctx, forecasts, cache),
        responses=ResponseBuilder(ctx, geocoder),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build the outbound clients on startup and close them on shutdown.

    Skipped when a journey service was injected into create_app().
    """
    if app.state.journey_service is not None:
        yield
        return

    ctx: ServiceContext = app.state.context
    s = ctx.settings

    http = httpx.AsyncClient(timeout=s.HTTP_TIMEOUT_S)
    cache: Optional[GeoWeatherCache] = None
    if s.REDIS_URL and s.CACHE_ENABLED:
        cache = GeoWeatherCache(
            Redis.from_url(s.REDIS_URL),
            radius_km=s.CACHE_RADIUS_KM,
        )
    else:
        logger.warning("Forecast cache disabled; every lookup goes to the live provider")

    app.state.journey_service = build_journey_service(ctx, http, cache)
    logger.info(f"{s.APP_NAME} {s.APP_VERSION} started ({s.ENVIRONMENT})")
    try:
        yield
    finally:
        await http.aclose()
        if cache is not None:
            await cache.close()
        app.state.journey_service = None
        logger.info(f"{s.APP_NAME} stopped")


async def wipercheck_error_handler(request: Request, exc: WiperCheckError) -> JSONResponse:
    body = JourneyResponse(error=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(by_alias=True))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(f"Unhandled error on {request.url.path}")
    body = JourneyResponse(error="Internal server error")
    return JSONResponse(status_code=500, content=body.model_dump(by_alias=True))


def create_app(
    settings: Optional[Settings] = None,
    journey_service: Optional[JourneyService] = None,
) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Precipitation forecasts sampled along a driving route.",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.context = ServiceContext(settings=settings)
    app.state.journey_service = journey_service

    # Routers
    app.include_router(routes_health.router)
    app.include_router(routes_journey.router)

    app.add_exception_handler(WiperCheckError, wipercheck_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    return app


app = create_app()
