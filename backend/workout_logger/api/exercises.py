"""Exercise API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select, delete

from workout_logger.auth import AuthContext, get_auth_context
from workout_logger.models.exercise import Exercise
from workout_logger.models.workout import Workout
from workout_logger.schemas.common import MessageResponse
from workout_logger.schemas.exercise import (
    ExerciseCreate,
    ExerciseUpdate,
    ExerciseResponse,
    ExerciseListResponse,
    ExerciseEnvelope,
    to_int,
    to_float,
)

logger = logging.getLogger(__name__)

router = APIRouter()

_COERCE = {"sets": to_int, "reps": to_int, "weight": to_float}


def _coerce_numbers(values: dict) -> dict:
    coerced = dict(values)
    try:
        for field, convert in _COERCE.items():
            if field in coerced:
                coerced[field] = convert(coerced[field])
    except (ValueError, OverflowError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Sets, reps and weight must be numbers"
        )
    return coerced


async def _require_owned_workout(ctx: AuthContext, workout_id: str) -> None:
    result = await ctx.db.execute(
        select(Workout.id).where(
            Workout.id == workout_id,
            Workout.user_id == ctx.user_id
        )
    )
    if result.scalar_one_or_none() is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Workout not found"
        )


@router.get("/workouts/{workout_id}/exercises", response_model=ExerciseListResponse)
async def list_exercises(workout_id: str, ctx: AuthContext = Depends(get_auth_context)):
    """List a workout's exercises in the order they were logged."""
    await _require_owned_workout(ctx, workout_id)

    result = await ctx.db.execute(
        select(Exercise)
        .where(
            Exercise.workout_id == workout_id,
            Exercise.user_id == ctx.user_id
        )
        .order_by(Exercise.created_at)
    )
    exercises = result.scalars().all()

    return ExerciseListResponse(
        exercises=[ExerciseResponse.model_validate(e) for e in exercises]
    )


@router.post(
    "/workouts/{workout_id}/exercises",
    response_model=ExerciseEnvelope,
    status_code=status.HTTP_201_CREATED
)
async def create_exercise(
    workout_id: str,
    payload: ExerciseCreate,
    ctx: AuthContext = Depends(get_auth_context)
):
    """Log an exercise against one of the caller's workouts."""
    if payload.missing_fields():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="All fields are required"
        )

    await _require_owned_workout(ctx, workout_id)

    values = _coerce_numbers(payload.model_dump())
    exercise = Exercise(
        workout_id=workout_id,
        user_id=ctx.user_id,
        **values
    )
    ctx.db.add(exercise)
    await ctx.db.commit()
    await ctx.db.refresh(exercise)

    return ExerciseEnvelope(exercise=ExerciseResponse.model_validate(exercise))


@router.patch("/exercises/{exercise_id}", response_model=ExerciseEnvelope)
async def update_exercise(
    exercise_id: str,
    payload: ExerciseUpdate,
    ctx: AuthContext = Depends(get_auth_context)
):
    """Overwrite the name, sets, reps and weight sent in the body."""
    changes = payload.model_dump(exclude_unset=True)
    if "exercise_name" in changes and not changes["exercise_name"]:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Exercise name cannot be empty"
        )
    changes = _coerce_numbers(changes)

    result = await ctx.db.execute(
        select(Exercise).where(
            Exercise.id == exercise_id,
            Exercise.user_id == ctx.user_id
        )
    )
    exercise = result.scalar_one_or_none()

    if not exercise:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Exercise not found"
        )

    for field, value in changes.items():
        setattr(exercise, field, value)

    await ctx.db.commit()
    await ctx.db.refresh(exercise)

    return ExerciseEnvelope(exercise=ExerciseResponse.model_validate(exercise))


@router.delete("/exercises/{exercise_id}", response_model=MessageResponse)
async def delete_exercise(exercise_id: str, ctx: AuthContext = Depends(get_auth_context)):
    """Delete an exercise; a missing or foreign id is a no-op."""
    await ctx.db.execute(
        delete(Exercise).where(
            Exercise.id == exercise_id,
            Exercise.user_id == ctx.user_id
        )
    )
    await ctx.db.commit()

    return MessageResponse(message="Exercise deleted successfully")
