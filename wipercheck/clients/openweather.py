# wipercheck/clients/openweather.py
from typing import Any, Dict, List

import httpx

from wipercheck.core.errors import ForecastUnavailableError, ProviderError
from wipercheck.core.http import get_with_retry, read_json
from wipercheck.models.journey import Conditions, Coordinates, Weather

PROVIDER = "openweather"


def _parse_hourly(entry: Dict[str, Any]) -> Weather:
    """
    Convert one One Call `hourly` entry into a Weather.

    Only the first `weather` condition is kept.
    """
    weather_list = entry.get("weather") or []
    primary = weather_list[0] if weather_list else {}
    return Weather(
        time=int(entry["dt"]),
        pop=float(entry.get("pop", 0.0)),
        conditions=Conditions(
            id=primary.get("id", 0),
            main=primary.get("main", ""),
            description=primary.get("description", ""),
        ),
    )


class OpenWeatherClient:
    """
    Hourly forecasts from the OpenWeather One Call API.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        api_key: str,
        base_url: str,
        max_retries: int = 2,
    ) -> None:
        if not api_key:
            raise ValueError("Missing api key for openweather client")
        if not base_url:
            raise ValueError("Missing base url for openweather client")
        self.http = http
        self.api_key = api_key
        self.base_url = base_url
        self.max_retries = max_retries

    async def forecast(self, coordinates: Coordinates) -> List[Weather]:
        response = await get_with_retry(
            self.http,
            self.base_url,
            PROVIDER,
            params={
                "appid": self.api_key,
                "lat": repr(coordinates.latitude),
                "lon": repr(coordinates.longitude),
                "units": "metric",
                "exclude": "current,minutely,daily,alerts",
            },
            max_retries=self.max_retries,
        )
        body = read_json(response, PROVIDER)

        hourly = body.get("hourly") if isinstance(body, dict) else None
        if not isinstance(hourly, list):
            raise ProviderError(PROVIDER, "response has no hourly forecast")
        try:
            return [_parse_hourly(entry) for entry in hourly]
        except (KeyError, TypeError, ValueError) as exc:
            raise ProviderError(PROVIDER, f"malformed hourly entry: {exc!r}") from exc

    async def hourly_forecast(self, coordinates: Coordinates, hour: int) -> Weather:
        """
        Return the forecast for the hour bucket `hour`.

        Raises ForecastUnavailableError when the hour is beyond the
        forecast horizon.
        """
        for weather in await self.forecast(coordinates):
            if weather.time == hour:
                return weather
        raise ForecastUnavailableError(PROVIDER, f"no hourly weather found for time {hour}")
