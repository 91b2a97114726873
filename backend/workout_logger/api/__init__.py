"""API routes."""

from fastapi import APIRouter

from workout_logger.api import health, workouts, exercises

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])
api_router.include_router(workouts.router, prefix="/workouts", tags=["Workouts"])
api_router.include_router(exercises.router, tags=["Exercises"])
