"""Pydantic schemas for API request/response models."""

from workout_logger.schemas.common import (
    ErrorResponse,
    HealthResponse,
    MessageResponse,
)
from workout_logger.schemas.exercise import (
    ExerciseCreate,
    ExerciseUpdate,
    ExerciseResponse,
    ExerciseListResponse,
    ExerciseEnvelope,
)
from workout_logger.schemas.workout import (
    WorkoutCreate,
    WorkoutUpdate,
    WorkoutResponse,
    WorkoutSummary,
    WorkoutDetailResponse,
    WorkoutListResponse,
    WorkoutEnvelope,
    WorkoutDetailEnvelope,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "MessageResponse",
    "ExerciseCreate",
    "ExerciseUpdate",
    "ExerciseResponse",
    "ExerciseListResponse",
    "ExerciseEnvelope",
    "WorkoutCreate",
    "WorkoutUpdate",
    "WorkoutResponse",
    "WorkoutSummary",
    "WorkoutDetailResponse",
    "WorkoutListResponse",
    "WorkoutEnvelope",
    "WorkoutDetailEnvelope",
]
