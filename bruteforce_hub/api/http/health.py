"""Health check endpoint for monitoring service status."""

from fastapi import APIRouter, status
from pydantic import BaseModel

from bruteforce_hub.managers.connection_registry import connection_registry

router = APIRouter()


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    users_watching: int
    users_bruteforcing: int


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check endpoint",
    tags=["health"],
)
async def health_check() -> HealthResponse:
    """
    Report service status together with the live registry counters.

    The server has no external dependencies, so it is healthy whenever it
    can answer. Both counters come from one registry snapshot.

    Returns:
        HealthResponse: Status and current watching/bruteforcing counts.
    """
    counts = connection_registry.counts()
    return HealthResponse(
        status="healthy",
        users_watching=counts.watching,
        users_bruteforcing=counts.bruteforcing,
    )
