# wipercheck/services/response_builder.py
import asyncio
from typing import List, Optional, Protocol, Tuple

from wipercheck.core.context import ServiceContext
from wipercheck.core.errors import ProviderError
from wipercheck.models.journey import Coordinates, Location, SampledStep, SummaryStep
from wipercheck.services.route_sampler import round_half_up


class ReverseGeocoder(Protocol):
    async def reverse(self, coordinates: Coordinates) -> List[Location]: ...


def pop_percent(pop: float) -> int:
    return round_half_up(pop * 100)


def filter_by_pop(steps: List[SampledStep], min_pop: float) -> List[SampledStep]:
    """Keep the steps whose precipitation probability reaches `min_pop`."""
    return [
        step
        for step in steps
        if step.hourly_weather is not None and step.hourly_weather.pop >= min_pop
    ]


def location_text(location: Optional[Location]) -> str:
    """
    "{locality}, {region}", or whichever of the two is present.
    """
    if location is None:
        return ""
    parts = [part for part in (location.locality, location.region) if part]
    return ", ".join(parts)


def capitalize_first(text: str) -> str:
    # str.capitalize() would lower-case the rest of the description
    return text[:1].upper() + text[1:]


def summarize(steps: List[SampledStep]) -> List[SummaryStep]:
    """
    Collapse consecutive steps with the same rounded pop into one entry.

    Each entry describes the first step of its run. The final step only
    opens an entry of its own when its percentage differs from the
    previous entry.
    """
    summary: List[SummaryStep] = []

    for step in steps:
        percent = pop_percent(step.hourly_weather.pop)
        if not summary or summary[-1].pop != percent:
            summary.append(
                SummaryStep(
                    location=location_text(step.location),
                    conditions=capitalize_first(step.hourly_weather.conditions.description),
                    pop=percent,
                )
            )

    return summary


class ResponseBuilder:
    """
    Turn weather-annotated steps into the detailed and summary views.
    """

    def __init__(self, ctx: ServiceContext, geocoder: ReverseGeocoder) -> None:
        self.ctx = ctx
        self.geocoder = geocoder
        self.log = ctx.logger_for("response_builder")

    async def build(
        self, steps: List[SampledStep], min_pop: float = 0.0
    ) -> Tuple[List[SampledStep], List[SummaryStep]]:
        retained = filter_by_pop(steps, min_pop)
        await self._locate(retained)
        return retained, summarize(retained)

    async def _locate(self, steps: List[SampledStep]) -> None:
        slots: List[Optional[Location]] = [None] * len(steps)
        limit = asyncio.Semaphore(max(self.ctx.settings.MAX_CONCURRENT_LOOKUPS, 1))

        async def fill(index: int, step: SampledStep) -> None:
            async with limit:
                slots[index] = await self._reverse(index, step.coordinates)

        await asyncio.gather(*(fill(i, step) for i, step in enumerate(steps)))

        for step, location in zip(steps, slots):
            step.location = location

    async def _reverse(self, index: int, coordinates: Coordinates) -> Optional[Location]:
        try:
            locations = await self.geocoder.reverse(coordinates)
        except ProviderError as exc:
            self.log.bind(
                step=index,
                latitude=coordinates.latitude,
                longitude=coordinates.longitude,
                action="ReverseGeoCode",
            ).warning("Reverse geocoding failed for step {}: {}", index, exc)
            return None

        if not locations:
            self.log.bind(step=index, action="ReverseGeoCode").warning(
                "No location found for step {} at ({}, {})",
                index,
                coordinates.latitude,
                coordinates.longitude,
            )
            return None
        return locations[0]
