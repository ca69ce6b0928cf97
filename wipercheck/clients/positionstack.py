# wipercheck/clients/positionstack.py
from typing import Any, Dict, List

import httpx

from wipercheck.core.errors import ProviderError
from wipercheck.core.http import get_with_retry, read_json
from wipercheck.models.journey import Coordinates, GeocodeResult, Location

PROVIDER = "positionstack"


class PositionstackClient:
    """
    Forward and reverse geocoding against the positionstack API.

    Both lookups ask for a single result and return an empty list when
    nothing matches.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        base_url: str,
        max_retries: int = 2,
    ) -> None:
        if not api_key:
            raise ValueError("Missing api key for positionstack client")
        if not base_url:
            raise ValueError("Missing base url for positionstack client")
        self.http = http
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries

    async def forward(self, address: str) -> List[GeocodeResult]:
        data = await self._query("forward", address)
        results: List[GeocodeResult] = []
        for item in data:
            try:
                results.append(
                    GeocodeResult(
                        coordinates=Coordinates(
                            latitude=float(item["latitude"]),
                            longitude=float(item["longitude"]),
                        ),
                        label=item.get("label") or "",
                    )
                )
            except (KeyError, TypeError, ValueError) as exc:
                raise ProviderError(PROVIDER, f"malformed forward result: {exc!r}") from exc
        return results

    async def reverse(self, coordinates: Coordinates) -> List[Location]:
        query = f"{coordinates.latitude},{coordinates.longitude}"
        data = await self._query("reverse", query)
        locations: List[Location] = []
        for item in data:
            if not isinstance(item, dict):
                raise ProviderError(PROVIDER, "malformed reverse result")
            locations.append(
                Location(
                    number=item.get("number"),
                    street=item.get("street"),
                    locality=item.get("locality"),
                    region=item.get("region"),
                    country=item.get("country"),
                )
            )
        return locations

    async def _query(self, endpoint: str, query: str) -> List[Dict[str, Any]]:
        response = await get_with_retry(
            self.http,
            f"{self.base_url}/{endpoint}",
            PROVIDER,
            params={"access_key": self.api_key, "query": query, "limit": 1},
            max_retries=self.max_retries,
        )
        body = read_json(response, PROVIDER)

        # positionstack answers an unmatched query with `"data": []`
        data = body.get("data") if isinstance(body, dict) else None
        if data is None:
            return []
        if not isinstance(data, list):
            raise ProviderError(PROVIDER, f"unexpected {endpoint} payload")
        # an empty match is sometimes reported as `[[]]`
        return [item for item in data if item]
