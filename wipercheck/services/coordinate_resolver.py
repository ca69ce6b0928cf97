# wipercheck/services/coordinate_resolver.py
import asyncio
from typing import List, Protocol

from wipercheck.core.context import ServiceContext
from wipercheck.core.errors import NotFoundError, ProviderError, UpstreamFailureError
from wipercheck.models.journey import GeocodeResult, Trip


class ForwardGeocoder(Protocol):
    async def forward(self, address: str) -> List[GeocodeResult]: ...


class CoordinateResolver:
    """
    Resolve the two free-text trip endpoints into coordinates.
    """

    def __init__(self, ctx: ServiceContext, geocoder: ForwardGeocoder) -> None:
        self.ctx = ctx
        self.geocoder = geocoder
        self.log = ctx.logger_for("coordinate_resolver")

    async def resolve(self, origin: str, destination: str) -> Trip:
        """
        Geocode both addresses concurrently and wait for both.

        If either lookup fails the first failure (origin before destination)
        is raised and the other result is discarded.
        """
        results = await asyncio.gather(
            self.geocode(origin),
            self.geocode(destination),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result

        from_match, to_match = results
        self.log.info(f"Trip resolved: '{from_match.label}' -> '{to_match.label}'")
        return Trip(origin=from_match.coordinates, destination=to_match.coordinates)

    async def geocode(self, address: str) -> GeocodeResult:
        try:
            matches = await self.geocoder.forward(address)
        except ProviderError as exc:
            self.log.bind(address=address, action="GeoCode").error(
                "Geocoding failed: {}", exc
            )
            raise UpstreamFailureError(
                f"Internal error geocoding address '{address}'."
            ) from exc

        if not matches:
            raise NotFoundError(address)
        return matches[0]
