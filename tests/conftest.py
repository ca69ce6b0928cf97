# tests/conftest.py
import os
import sys
from datetime import datetime, timezone

import pytest

# Add the project root directory to sys.path so that "import wipercheck" works
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from wipercheck.core.config import Settings  # noqa: E402
from wipercheck.core.context import ServiceContext  # noqa: E402
from wipercheck.models.journey import (  # noqa: E402
    Conditions,
    Coordinates,
    SampledStep,
    Weather,
)

# 2026-10-19 12:00:00 UTC
NOW = datetime(2026, 10, 19, 12, 0, 0, tzinfo=timezone.utc)
NOW_TS = int(NOW.timestamp())


def make_weather(pop: float, description: str = "light rain", time: int = 0) -> Weather:
    return Weather(
        time=time,
        pop=pop,
        conditions=Conditions(id=500, main="Rain", description=description),
    )


def make_step(
    total_duration: int = 600,
    lat: float = 45.46,
    lon: float = 9.19,
    name: str = "Via Roma",
    weather: Weather | None = None,
) -> SampledStep:
    return SampledStep(
        name=name,
        step_duration=60,
        total_duration=total_duration,
        coordinates=Coordinates(latitude=lat, longitude=lon),
        hourly_weather=weather,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        POSITIONSTACK_API_KEY="ps-key",
        OPENWEATHER_API_KEY="ow-key",
        REDIS_URL="",
        CACHE_ENABLED=True,
        MAX_CONCURRENT_LOOKUPS=4,
    )


@pytest.fixture
def ctx(settings) -> ServiceContext:
    return ServiceContext(settings=settings)
