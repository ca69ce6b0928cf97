# wipercheck/models/journey.py

import json
import random
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """
    Latitude/longitude pair in degrees.
    """
    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float


class GeocodeResult(BaseModel):
    """
    Forward-geocoding match: coordinates plus the provider's label.
    """
    coordinates: Coordinates
    label: str = ""


class Location(BaseModel):
    """
    Reverse-geocoded address of a point along the route.
    """
    number: Optional[str] = None
    street: Optional[str] = None
    locality: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None


class Trip(BaseModel):
    origin: Coordinates
    destination: Coordinates


class RouteStep(BaseModel):
    """
    One segment of the routed path, as returned by the routing provider.

    An empty name means "same road as the previous named segment".
    """
    name: str = ""
    step_duration: float
    total_duration: float = 0.0
    coordinates: Coordinates


class Route(BaseModel):
    steps: List[RouteStep]
    duration: float


class Conditions(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = 0
    main: str = ""
    description: str = ""


class Weather(BaseModel):
    """
    Hourly forecast for one hour bucket.

    `time` is the unix timestamp of the top of the hour.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    time: int = Field(0, alias="unixTime")
    conditions: Conditions = Field(default_factory=Conditions)
    pop: float = 0.0

    def at_hour(self, bucket: int) -> "Weather":
        """Return a copy stamped with the given hour bucket."""
        return self.model_copy(update={"time": bucket})


class CacheRecord(BaseModel):
    """
    Member stored in the geospatial forecast cache.

    `rand` only keeps otherwise identical payloads distinct inside the
    cache's member set; readers ignore it.
    """
    model_config = ConfigDict(populate_by_name=True)

    rand: float = Field(default_factory=random.random, alias="Rand")
    hourly: Weather = Field(alias="Hourly")

    def dumps(self) -> str:
        return json.dumps(self.model_dump(by_alias=True), separators=(",", ":"))

    @classmethod
    def loads(cls, payload: str) -> "CacheRecord":
        return cls.model_validate_json(payload)


class SampledStep(BaseModel):
    """
    A route step selected for a weather lookup.

    Weather is filled in by the weather resolver, location by the
    response builder.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: str = ""
    step_duration: int = Field(0, alias="stepDuration")
    total_duration: int = Field(0, alias="totalDuration")
    coordinates: Coordinates
    hourly_weather: Optional[Weather] = Field(None, alias="hourlyWeather")
    location: Optional[Location] = None


class SummaryStep(BaseModel):
    location: str = ""
    conditions: str = ""
    pop: int = 0


class JourneyResponse(BaseModel):
    """
    Body of the /journey endpoint; `error` is only set on failure.
    """
    model_config = ConfigDict(populate_by_name=True)

    summary: List[SummaryStep] = Field(default_factory=list)
    detailed_steps: List[SampledStep] = Field(default_factory=list, alias="detailedSteps")
    error: Optional[str] = None
