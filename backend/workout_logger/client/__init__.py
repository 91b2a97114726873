"""Terminal front end for the Workout Logger API."""

from workout_logger.client.api import ApiError, WorkoutApiClient
from workout_logger.client.auth import AuthClient, AuthError, Session

__all__ = [
    "ApiError",
    "WorkoutApiClient",
    "AuthClient",
    "AuthError",
    "Session",
]
