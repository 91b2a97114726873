"""Workout API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select, func, desc, delete
from sqlalchemy.orm import selectinload

from workout_logger.auth import AuthContext, get_auth_context
from workout_logger.models.base import utcnow
from workout_logger.models.exercise import Exercise
from workout_logger.models.workout import Workout
from workout_logger.schemas.common import MessageResponse
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

logger = logging.getLogger(__name__)

router = APIRouter()


def _owned_workout_query(ctx: AuthContext, workout_id: str):
    return select(Workout).where(
        Workout.id == workout_id,
        Workout.user_id == ctx.user_id
    )


@router.get("", response_model=WorkoutListResponse)
async def list_workouts(ctx: AuthContext = Depends(get_auth_context)):
    """List the caller's workouts, newest first, each with its exercise count."""
    counts = (
        select(
            Exercise.workout_id,
            func.count(Exercise.id).label("exercise_count")
        )
        .group_by(Exercise.workout_id)
        .subquery()
    )

    result = await ctx.db.execute(
        select(Workout, func.coalesce(counts.c.exercise_count, 0))
        .outerjoin(counts, counts.c.workout_id == Workout.id)
        .where(Workout.user_id == ctx.user_id)
        .order_by(desc(Workout.workout_date), desc(Workout.created_at))
    )

    workouts = []
    for workout, exercise_count in result.all():
        summary = WorkoutSummary.model_validate(workout)
        summary.exercise_count = exercise_count
        workouts.append(summary)

    return WorkoutListResponse(workouts=workouts)


@router.get("/{workout_id}", response_model=WorkoutDetailEnvelope)
async def get_workout(workout_id: str, ctx: AuthContext = Depends(get_auth_context)):
    """Get one workout with all of its exercises."""
    result = await ctx.db.execute(
        _owned_workout_query(ctx, workout_id).options(selectinload(Workout.exercises))
    )
    workout = result.scalar_one_or_none()

    if not workout:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Workout not found"
        )

    return WorkoutDetailEnvelope(workout=WorkoutDetailResponse.model_validate(workout))


@router.post("", response_model=WorkoutEnvelope, status_code=status.HTTP_201_CREATED)
async def create_workout(payload: WorkoutCreate, ctx: AuthContext = Depends(get_auth_context)):
    """Create a workout owned by the caller."""
    if not payload.name or not payload.workout_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Name and date are required"
        )

    workout = Workout(
        user_id=ctx.user_id,
        name=payload.name,
        workout_date=payload.workout_date,
        notes=payload.notes or None
    )
    ctx.db.add(workout)
    await ctx.db.commit()
    await ctx.db.refresh(workout)

    logger.info(f"Created workout {workout.id} for user {ctx.user_id}")
    return WorkoutEnvelope(workout=WorkoutResponse.model_validate(workout))


@router.patch("/{workout_id}", response_model=WorkoutEnvelope)
async def update_workout(
    workout_id: str,
    payload: WorkoutUpdate,
    ctx: AuthContext = Depends(get_auth_context)
):
    """Overwrite the name, date and notes sent in the body."""
    changes = payload.model_dump(exclude_unset=True)
    for required in ("name", "workout_date"):
        if required in changes and not changes[required]:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Name and date cannot be empty"
            )

    result = await ctx.db.execute(_owned_workout_query(ctx, workout_id))
    workout = result.scalar_one_or_none()

    if not workout:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Workout not found"
        )

    for field, value in changes.items():
        setattr(workout, field, value)
    workout.updated_at = utcnow()

    await ctx.db.commit()
    await ctx.db.refresh(workout)

    return WorkoutEnvelope(workout=WorkoutResponse.model_validate(workout))


@router.delete("/{workout_id}", response_model=MessageResponse)
async def delete_workout(workout_id: str, ctx: AuthContext = Depends(get_auth_context)):
    """
    Delete a workout. The store cascades the delete to its exercises.

    Deleting an id that does not exist (or belongs to someone else) matches
    no rows and still succeeds.
    """
    result = await ctx.db.execute(
        delete(Workout).where(
            Workout.id == workout_id,
            Workout.user_id == ctx.user_id
        )
    )
    await ctx.db.commit()

    if result.rowcount:
        logger.info(f"Deleted workout {workout_id} for user {ctx.user_id}")
    return MessageResponse(message="Workout deleted successfully")
