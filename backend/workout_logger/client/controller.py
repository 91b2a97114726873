"""Glue between the view models and the API / auth clients."""

import logging
from typing import Optional

from workout_logger.client.api import ApiError, WorkoutApiClient
from workout_logger.client.auth import AuthClient, AuthError, Session
from workout_logger.client.state import (
    AuthForm,
    CreateWorkoutForm,
    Dashboard,
    ExerciseForm,
)

logger = logging.getLogger(__name__)


class DuplicateSubmission(Exception):
    """The same form is already being submitted."""


def submit_auth(form: AuthForm, auth: AuthClient) -> Optional[Session]:
    """
    Sign in or sign up with the form's credentials.

    Returns the session on sign-in. Sign-up returns None and leaves a
    message in ``form.error`` telling the user to confirm their email.
    """
    if form.loading:
        raise DuplicateSubmission("Sign in already in progress")

    problem = form.validate()
    if problem:
        form.error = problem
        return None

    form.loading = True
    form.error = ""
    try:
        if form.is_sign_up:
            auth.sign_up(form.email, form.password)
            form.error = "Check your email for the confirmation link!"
            return None
        return auth.sign_in_with_password(form.email, form.password)
    except AuthError as e:
        form.error = str(e)
        return None
    finally:
        form.loading = False


class DashboardController:
    """
    Runs the dashboard's actions against the API and applies the results
    to the view model. Action methods return an error message for the
    user, or None on success.
    """

    def __init__(self, api: WorkoutApiClient, state: Optional[Dashboard] = None,
                 session: Optional[Session] = None, auth: Optional[AuthClient] = None):
        self.api = api
        self.state = state or Dashboard()
        self.session = session
        self.auth = auth

    def _refresh(self) -> bool:
        if self.session is None or self.auth is None:
            return False
        try:
            self.session = self.auth.refresh_session(self.session)
        except AuthError as e:
            logger.warning(f"Session refresh failed: {e}")
            return False
        self.api.access_token = self.session.access_token
        return True

    def _call(self, method, *args, **kwargs):
        """
        Run an API call with a live token: refresh an expired session first,
        and refresh once more if the API still answers 401.
        """
        if self.session is not None and self.session.is_expired():
            self._refresh()
        try:
            return method(*args, **kwargs)
        except ApiError as e:
            if e.status_code != 401 or not self._refresh():
                raise
        return method(*args, **kwargs)

    def load_workouts(self) -> None:
        try:
            self.state.workouts_loaded(self._call(self.api.list_workouts))
        except ApiError as e:
            logger.error(f"Error fetching workouts: {e.message}")
            self.state.loading = False

    def create_workout(self, form: CreateWorkoutForm) -> Optional[str]:
        if form.loading:
            raise DuplicateSubmission("Workout is already being created")
        problem = form.validate()
        if problem:
            return problem

        form.loading = True
        try:
            workout = self._call(self.api.create_workout, **form.payload())
        except ApiError as e:
            return f"Error creating workout: {e.message}"
        finally:
            form.loading = False

        self.state.workout_created(workout)
        self.load_exercises()
        return None

    def delete_workout(self, workout_id: str) -> Optional[str]:
        if self.state.deleting == workout_id:
            raise DuplicateSubmission("Workout is already being deleted")

        self.state.deleting = workout_id
        try:
            self._call(self.api.delete_workout, workout_id)
        except ApiError as e:
            return f"Error deleting workout: {e.message}"
        finally:
            self.state.deleting = None

        self.state.workout_deleted(workout_id)
        return None

    def select_workout(self, workout_id: str) -> None:
        for workout in self.state.workouts:
            if workout["id"] == workout_id:
                self.state.select_workout(workout)
                self.load_exercises()
                return
        raise KeyError(workout_id)

    def load_exercises(self) -> None:
        detail = self.state.selected
        if detail is None:
            return
        try:
            detail.exercises_loaded(self._call(self.api.list_exercises, detail.workout["id"]))
        except ApiError as e:
            logger.error(f"Error fetching exercises: {e.message}")
            detail.loading = False

    def add_exercise(self, form: ExerciseForm) -> Optional[str]:
        detail = self.state.selected
        if detail is None:
            return "No workout selected"
        if form.loading:
            raise DuplicateSubmission("Exercise is already being added")
        problem = form.validate()
        if problem:
            return problem

        form.loading = True
        try:
            exercise = self._call(self.api.add_exercise, detail.workout["id"], **form.payload())
        except ApiError as e:
            return f"Error adding exercise: {e.message}"
        finally:
            form.loading = False

        detail.exercise_added(exercise)
        form.clear()
        return None

    def delete_exercise(self, exercise_id: str) -> Optional[str]:
        detail = self.state.selected
        if detail is None:
            return "No workout selected"
        if detail.deleting == exercise_id:
            raise DuplicateSubmission("Exercise is already being deleted")

        detail.deleting = exercise_id
        try:
            self._call(self.api.delete_exercise, exercise_id)
        except ApiError as e:
            return f"Error deleting exercise: {e.message}"
        finally:
            detail.deleting = None

        detail.exercise_deleted(exercise_id)
        return None

    def back(self) -> None:
        self.state.back()
