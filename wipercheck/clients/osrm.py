# wipercheck/clients/osrm.py
from typing import Any, Dict, List

import httpx

from wipercheck.core.errors import ProviderError
from wipercheck.core.http import get_with_retry, read_json
from wipercheck.models.journey import Coordinates, Route, RouteStep, Trip

PROVIDER = "osrm"


class OSRMClient:
    """
    Driving routes from an OSRM `route` service.

    Only the first route and its first leg are consumed; each OSRM step
    becomes a RouteStep located at its maneuver point.
    """

    def __init__(self, http: httpx.AsyncClient, base_url: str, max_retries: int = 2) -> None:
        if not base_url:
            raise ValueError("Missing base url for osrm client")
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries

    async def route(self, trip: Trip) -> Route:
        origin, destination = trip.origin, trip.destination
        url = (
            f"{self.base_url}/"
            f"{origin.longitude:f},{origin.latitude:f};"
            f"{destination.longitude:f},{destination.latitude:f}"
        )

        response = await get_with_retry(
            self.http,
            url,
            PROVIDER,
            params={"steps": "true", "overview": "false"},
            max_retries=self.max_retries,
        )
        body = read_json(response, PROVIDER)

        if not isinstance(body, dict) or body.get("code") != "Ok":
            code = body.get("code") if isinstance(body, dict) else None
            raise ProviderError(PROVIDER, f"route request returned code {code!r}")

        routes = body.get("routes") or []
        if not routes or not routes[0].get("legs"):
            raise ProviderError(PROVIDER, "no route found between trip endpoints")

        best = routes[0]
        return Route(
            steps=self._steps_from_osrm(best["legs"][0].get("steps") or []),
            duration=float(best.get("duration", 0.0)),
        )

    @staticmethod
    def _steps_from_osrm(osrm_steps: List[Dict[str, Any]]) -> List[RouteStep]:
        steps: List[RouteStep] = []
        try:
            for step in osrm_steps:
                # OSRM locations are [lon, lat]
                lon, lat = step["maneuver"]["location"][:2]
                steps.append(
                    RouteStep(
                        name=step.get("name") or "",
                        step_duration=float(step.get("duration", 0.0)),
                        coordinates=Coordinates(latitude=lat, longitude=lon),
                    )
                )
        except (KeyError, TypeError, ValueError) as exc:
            raise ProviderError(PROVIDER, f"malformed route step: {exc!r}") from exc
        return steps
