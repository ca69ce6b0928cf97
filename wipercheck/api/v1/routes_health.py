# wipercheck/api/v1/routes_health.py
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(
    prefix="/health",
    tags=["health"],
)


@router.get("", summary="Health check", response_class=PlainTextResponse)
async def health_check() -> str:
    """
    Liveness probe; does not touch any upstream provider.
    """
    return "OK"
