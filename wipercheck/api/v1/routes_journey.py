# wipercheck/api/v1/routes_journey.py
from typing import Optional, Tuple

from fastapi import APIRouter, Depends, Query, Request

from wipercheck.core.config import Settings
from wipercheck.core.errors import BadRequestError
from wipercheck.models.journey import JourneyResponse
from wipercheck.services.journey_service import JourneyService

router = APIRouter(
    prefix="/journey",
    tags=["journey"],
)


def get_journey_service(request: Request) -> JourneyService:
    return request.app.state.journey_service


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def parse_journey_params(
    origin: Optional[str],
    destination: Optional[str],
    min_pop: Optional[str],
    delay: Optional[str],
    max_delay_minutes: int = 720,
) -> Tuple[str, str, float, int]:
    """
    Validate raw /journey query parameters.

    Empty values count as absent. Returns (from, to, min_pop as a 0-1
    probability, delay in minutes) or raises BadRequestError.
    """
    if not origin:
        raise BadRequestError("Missing 'from' query parameter in request")
    if not destination:
        raise BadRequestError("Missing 'to' query parameter in request")

    pop_threshold = 0.0
    if min_pop:
        try:
            pop_threshold = float(min_pop)
        except ValueError:
            raise BadRequestError(f"Invalid 'minPop' value '{min_pop}': expected a number") from None
        if not 0 <= pop_threshold <= 100:
            raise BadRequestError("'minPop' must be a percentage between 0 and 100")

    delay_minutes = 0
    if delay:
        try:
            delay_minutes = int(delay)
        except ValueError:
            raise BadRequestError(f"Invalid 'delay' value '{delay}': expected whole minutes") from None
        if not 0 <= delay_minutes <= max_delay_minutes:
            raise BadRequestError(
                f"'delay' must be between 0 and {max_delay_minutes} minutes"
            )

    return origin, destination, pop_threshold / 100.0, delay_minutes


@router.get(
    "",
    response_model=JourneyResponse,
    response_model_by_alias=True,
    summary="Forecast precipitation along a driving route",
)
async def journey(
    origin: Optional[str] = Query(None, alias="from"),
    destination: Optional[str] = Query(None, alias="to"),
    min_pop: Optional[str] = Query(None, alias="minPop"),
    delay: Optional[str] = Query(None),
    service: JourneyService = Depends(get_journey_service),
    settings: Settings = Depends(get_settings),
) -> JourneyResponse:
    """
    Forecast precipitation along the route between two addresses.

    - `minPop`: only keep points with at least this precipitation chance (0-100).
    - `delay`: departure delay in minutes.
    """
    origin, destination, pop_threshold, delay_minutes = parse_journey_params(
        origin, destination, min_pop, delay, settings.MAX_DELAY_MINUTES
    )
    return await service.journey(origin, destination, pop_threshold, delay_minutes)
