"""
MoodJourney Backend — Health Check Route
=========================================

Static liveness probe. It deliberately does not touch the database: the
process only serves requests after the gateway connected at startup.
"""

from fastapi import APIRouter

from moodjourney.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service liveness check",
)
async def health_check() -> HealthResponse:
    return HealthResponse()
