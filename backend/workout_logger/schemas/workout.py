"""Workout schemas."""

from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, field_validator

from workout_logger.schemas.exercise import ExerciseResponse


class WorkoutCreate(BaseModel):
    """Schema for creating a workout."""
    name: Optional[str] = None
    workout_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("workout_date", mode="before")
    @classmethod
    def blank_date_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


class WorkoutUpdate(WorkoutCreate):
    """
    Schema for updating a workout.

    Only the fields present in the request body are written; a field sent
    as null is written as null.
    """
    pass


class WorkoutResponse(BaseModel):
    """Schema for a single workout row."""
    id: str
    user_id: str
    name: str
    workout_date: date
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class WorkoutSummary(WorkoutResponse):
    """Workout row as shown in the list, with its exercise count."""
    exercise_count: int = 0


class WorkoutDetailResponse(WorkoutResponse):
    """Workout with all of its exercises nested."""
    exercises: List[ExerciseResponse] = []


class WorkoutListResponse(BaseModel):
    workouts: List[WorkoutSummary]


class WorkoutEnvelope(BaseModel):
    workout: WorkoutResponse


class WorkoutDetailEnvelope(BaseModel):
    workout: WorkoutDetailResponse
