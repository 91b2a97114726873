"""Liveness endpoint."""

from fastapi import APIRouter

from workout_logger.schemas.common import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint."""
    return HealthResponse(status="ok", message="Server is running")
