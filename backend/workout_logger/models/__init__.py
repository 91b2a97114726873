"""Database models."""

from workout_logger.models.base import Base
from workout_logger.models.workout import Workout
from workout_logger.models.exercise import Exercise

__all__ = [
    "Base",
    "Workout",
    "Exercise",
]
