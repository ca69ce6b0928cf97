# wipercheck/services/weather_resolver.py
import asyncio
from datetime import datetime, timezone
from typing import List, Optional, Protocol

from pydantic import ValidationError
from redis.exceptions import RedisError

from wipercheck.core.context import ServiceContext
from wipercheck.core.errors import ProviderError
from wipercheck.models.journey import CacheRecord, Coordinates, SampledStep, Weather

SECONDS_PER_HOUR = 3600


class ForecastProvider(Protocol):
    async def hourly_forecast(self, coordinates: Coordinates, hour: int) -> Weather: ...


class WeatherCacheReader(Protocol):
    async def nearest(self, coordinates: Coordinates, hour: int) -> Optional[str]: ...


def hour_bucket(now: datetime, offset_seconds: float) -> int:
    """
    Unix timestamp of the top of the UTC hour `offset_seconds` after `now`.
    """
    target = int(now.timestamp() + offset_seconds)
    return target - target % SECONDS_PER_HOUR


class WeatherResolver:
    """
    Attach an hourly forecast to every sampled step.

    Each step is resolved independently: the geospatial cache is consulted
    first and the live forecast provider only on a miss. Steps whose
    forecast cannot be obtained are dropped from the result.
    """

    def __init__(
        self,
        ctx: ServiceContext,
        forecasts: ForecastProvider,
        cache: Optional[WeatherCacheReader] = None,
    ) -> None:
        self.ctx = ctx
        self.forecasts = forecasts
        self.cache = cache
        self.log = ctx.logger_for("weather_resolver")

    @property
    def cache_enabled(self) -> bool:
        return self.cache is not None and self.ctx.settings.CACHE_ENABLED

    async def resolve(
        self,
        steps: List[SampledStep],
        delay_minutes: int = 0,
        now: Optional[datetime] = None,
    ) -> List[SampledStep]:
        now = now or datetime.now(timezone.utc)
        slots: List[Optional[Weather]] = [None] * len(steps)
        limit = asyncio.Semaphore(max(self.ctx.settings.MAX_CONCURRENT_LOOKUPS, 1))

        async def fill(index: int, step: SampledStep) -> None:
            bucket = hour_bucket(now, step.total_duration + delay_minutes * 60)
            async with limit:
                slots[index] = await self._weather_for(index, step, bucket)

        await asyncio.gather(*(fill(i, step) for i, step in enumerate(steps)))

        resolved: List[SampledStep] = []
        for step, weather in zip(steps, slots):
            if weather is None:
                continue
            step.hourly_weather = weather
            resolved.append(step)

        self.log.info(f"Resolved weather for {len(resolved)}/{len(steps)} sampled steps")
        return resolved

    async def _weather_for(self, index: int, step: SampledStep, bucket: int) -> Optional[Weather]:
        if self.cache_enabled:
            cached = await self._from_cache(index, step, bucket)
            if cached is not None:
                return cached

        try:
            weather = await self.forecasts.hourly_forecast(step.coordinates, bucket)
        except ProviderError as exc:
            self.log.bind(
                step=index,
                hour=bucket,
                latitude=step.coordinates.latitude,
                longitude=step.coordinates.longitude,
            ).warning("Dropping step {}: no forecast available: {}", index, exc)
            return None
        return weather.at_hour(bucket)

    async def _from_cache(self, index: int, step: SampledStep, bucket: int) -> Optional[Weather]:
        try:
            payload = await self.cache.nearest(step.coordinates, bucket)
        except (RedisError, OSError, UnicodeDecodeError) as exc:
            self.log.bind(step=index, hour=bucket).warning(
                "Cache lookup failed for step {}, falling back to forecast: {!r}", index, exc
            )
            return None

        if payload is None:
            return None

        try:
            record = CacheRecord.loads(payload)
        except ValidationError as exc:
            self.log.bind(step=index, hour=bucket).warning(
                "Discarding undecodable cache record for step {}: {}", index, exc
            )
            return None

        self.log.debug(f"Cache hit for step {index} in hour {bucket}")
        return record.hourly.at_hour(bucket)
