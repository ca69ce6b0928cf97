# wipercheck/clients/weather_cache.py
from typing import Optional

from redis.asyncio import Redis

from wipercheck.models.journey import Coordinates


class GeoWeatherCache:
    """
    Read side of the geospatial forecast cache.

    Each hour bucket is a Redis GEO set named after its unix timestamp;
    members are serialised CacheRecords placed at the forecast location.
    Population is done by a separate writer.
    """

    def __init__(self, redis: Redis, radius_km: float = 10.0) -> None:
        self.redis = redis
        self.radius_km = radius_km

    async def nearest(self, coordinates: Coordinates, hour: int) -> Optional[str]:
        """
        Return the payload of the closest record within the radius, if any.

        Members are decoded leniently; a corrupt member yields a payload
        that fails record validation. Redis errors propagate to the caller.
        """
        members = await self.redis.geosearch(
            str(hour),
            longitude=coordinates.longitude,
            latitude=coordinates.latitude,
            radius=self.radius_km,
            unit="km",
            sort="ASC",
            count=1,
        )
        if not members:
            return None

        member = members[0]
        if isinstance(member, bytes):
            member = member.decode("utf-8", errors="replace")
        return member

    async def close(self) -> None:
        await self.redis.aclose()
