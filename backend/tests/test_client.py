"""Terminal front end: API/auth clients, view models and controller."""

import time

import pytest
import requests

from workout_logger.client.api import ApiError, WorkoutApiClient
from workout_logger.client.auth import AuthClient, AuthError, Session
from workout_logger.client.controller import DashboardController, DuplicateSubmission, submit_auth
from workout_logger.client.state import (
    AuthForm,
    CreateWorkoutForm,
    Dashboard,
    ExerciseForm,
)


@pytest.fixture
def api(client):
    return WorkoutApiClient("", "token-a", http=client)


@pytest.fixture
def controller(api):
    return DashboardController(api)


# API client against the application

def test_api_client_round_trip(api):
    assert api.health()["status"] == "ok"

    workout = api.create_workout("Leg Day", "2024-01-01", notes="Heavy")
    exercise = api.add_exercise(workout["id"], "Squat", 3, 10, 0)
    assert exercise["weight"] == 0

    [listed] = api.list_workouts()
    assert listed["exercise_count"] == 1

    assert api.update_exercise(exercise["id"], reps=12)["reps"] == 12
    assert api.update_workout(workout["id"], name="Legs")["name"] == "Legs"
    assert [e["id"] for e in api.get_workout(workout["id"])["exercises"]] == [exercise["id"]]

    assert api.delete_exercise(exercise["id"]) == "Exercise deleted successfully"
    assert api.list_exercises(workout["id"]) == []
    assert api.delete_workout(workout["id"]) == "Workout deleted successfully"
    assert api.list_workouts() == []


def test_api_client_raises_error_body(api):
    with pytest.raises(ApiError) as exc_info:
        api.get_workout("missing")
    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Workout not found"


def test_api_client_with_bad_token(client):
    with pytest.raises(ApiError) as exc_info:
        WorkoutApiClient("", "forged", http=client).list_workouts()
    assert exc_info.value.status_code == 401


# Auth client against a stubbed identity service

class FakeResponse:
    def __init__(self, status_code, body=None, text=""):
        self.status_code = status_code
        self._body = body
        self.text = text

    def json(self):
        if self._body is None:
            raise ValueError("no body")
        return self._body


class FakeAuthHTTP:
    def __init__(self, *responses, error=None):
        self.responses = list(responses)
        self.error = error
        self.calls = []

    def post(self, url, json=None, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "params": params, "headers": headers})
        if self.error:
            raise self.error
        return self.responses.pop(0)


TOKEN_BODY = {
    "access_token": "access",
    "refresh_token": "refresh",
    "expires_in": 3600,
    "user": {"id": "user-1", "email": "a@example.com"},
}


def test_sign_in_with_password():
    http = FakeAuthHTTP(FakeResponse(200, TOKEN_BODY))
    auth = AuthClient("https://auth.example.com", "anon", http=http)

    session = auth.sign_in_with_password("a@example.com", "secret")

    assert session.access_token == "access"
    assert session.email == "a@example.com"
    assert not session.is_expired()
    call = http.calls[0]
    assert call["url"] == "https://auth.example.com/auth/v1/token"
    assert call["params"] == {"grant_type": "password"}
    assert call["headers"]["apikey"] == "anon"


def test_sign_in_failure_uses_provider_message():
    http = FakeAuthHTTP(FakeResponse(400, {"error_description": "Invalid login credentials"}))
    auth = AuthClient("https://auth.example.com", "anon", http=http)
    with pytest.raises(AuthError, match="Invalid login credentials"):
        auth.sign_in_with_password("a@example.com", "wrong")


def test_sign_in_requires_credentials():
    http = FakeAuthHTTP()
    auth = AuthClient("https://auth.example.com", "anon", http=http)
    with pytest.raises(AuthError, match="Please fill in all fields"):
        auth.sign_in_with_password("", "secret")
    assert http.calls == []


def test_unreachable_identity_service():
    http = FakeAuthHTTP(error=requests.ConnectionError("down"))
    auth = AuthClient("https://auth.example.com", "anon", http=http)
    with pytest.raises(AuthError):
        auth.sign_up("a@example.com", "secret")


def test_refresh_and_sign_out():
    http = FakeAuthHTTP(
        FakeResponse(200, dict(TOKEN_BODY, access_token="access-2")),
        FakeResponse(204),
    )
    auth = AuthClient("https://auth.example.com", "anon", http=http)
    session = auth.refresh_session(Session(access_token="access", refresh_token="refresh"))
    assert session.access_token == "access-2"
    assert http.calls[0]["json"] == {"refresh_token": "refresh"}

    auth.sign_out(session)
    assert http.calls[1]["url"].endswith("/auth/v1/logout")
    assert http.calls[1]["headers"]["Authorization"] == "Bearer access-2"


def test_refresh_without_refresh_token():
    auth = AuthClient("https://auth.example.com", "anon", http=FakeAuthHTTP())
    with pytest.raises(AuthError):
        auth.refresh_session(Session(access_token="access"))


class StubAuth:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def sign_up(self, email, password):
        self.calls.append(("sign_up", email))
        if self.error:
            raise self.error
        return {"id": "user-1"}

    def sign_in_with_password(self, email, password):
        self.calls.append(("sign_in", email))
        if self.error:
            raise self.error
        return Session(access_token="access", user={"email": email})


def test_submit_auth_signs_in():
    form = AuthForm(email="a@example.com", password="secret")
    session = submit_auth(form, StubAuth())
    assert session.email == "a@example.com"
    assert form.error == ""
    assert not form.loading


def test_submit_auth_sign_up_asks_for_confirmation():
    form = AuthForm(email="a@example.com", password="secret")
    form.toggle_mode()
    assert form.submit_label == "Sign Up"
    assert submit_auth(form, StubAuth()) is None
    assert form.error == "Check your email for the confirmation link!"


def test_submit_auth_reports_errors():
    form = AuthForm(email="a@example.com", password="nope")
    assert submit_auth(form, StubAuth(AuthError("Invalid login credentials"))) is None
    assert form.error == "Invalid login credentials"

    empty = AuthForm()
    stub = StubAuth()
    assert submit_auth(empty, stub) is None
    assert empty.error == "Please fill in all fields"
    assert stub.calls == []


def test_submit_auth_rejects_duplicate_submission():
    with pytest.raises(DuplicateSubmission):
        submit_auth(AuthForm(email="a", password="b", loading=True), StubAuth())


# View models

def test_dashboard_events():
    state = Dashboard()
    state.workouts_loaded([{"id": "1", "name": "Old", "exercise_count": 2}])
    assert not state.loading

    state.open_create_modal()
    state.workout_created({"id": "2", "name": "New"})
    assert [w["id"] for w in state.workouts] == ["2", "1"]
    assert state.workouts[0]["exercise_count"] == 0
    assert state.selected.workout["id"] == "2"
    assert not state.show_create_modal

    state.selected.exercises_loaded([])
    state.selected.exercise_added({"id": "e1"})
    state.selected.exercise_added({"id": "e2"})
    state.selected.exercise_deleted("e1")
    assert state.selected.exercise_count == 1

    state.back()
    assert state.selected is None
    assert state.workouts[0]["exercise_count"] == 1

    state.select_workout(state.workouts[1])
    state.workout_deleted("1")
    assert state.selected is None
    assert [w["id"] for w in state.workouts] == ["2"]


def test_forms_validate():
    assert CreateWorkoutForm().validate() == "Please enter a workout name"
    assert CreateWorkoutForm(name="Legs").validate() is None

    assert ExerciseForm(exercise_name="Squat", sets="3", reps="10").validate() == "Please fill in all fields"
    assert ExerciseForm(exercise_name="Squat", sets="3", reps="10", weight="0").validate() is None
    assert ExerciseForm(exercise_name="Squat", sets="x", reps="10", weight="5").validate() == \
        "Sets, reps and weight must be numbers"


# Controller driving the real API

def test_controller_workflow(controller):
    controller.load_workouts()
    assert controller.state.workouts == []
    assert not controller.state.loading

    assert controller.create_workout(CreateWorkoutForm(name="Leg Day", workout_date="2024-01-01")) is None
    detail = controller.state.selected
    assert detail.workout["name"] == "Leg Day"
    assert detail.exercises == [] and not detail.loading

    form = ExerciseForm(exercise_name="Squat", sets="3", reps="10", weight="100")
    assert controller.add_exercise(form) is None
    assert form.exercise_name == "" and form.weight == ""
    assert [e["exercise_name"] for e in detail.exercises] == ["Squat"]

    assert controller.delete_exercise(detail.exercises[0]["id"]) is None
    assert detail.exercises == []

    controller.back()
    workout_id = controller.state.workouts[0]["id"]
    controller.select_workout(workout_id)
    assert controller.state.selected.workout["id"] == workout_id

    assert controller.delete_workout(workout_id) is None
    assert controller.state.workouts == []
    assert controller.state.selected is None


def test_controller_reports_validation_and_api_errors(controller):
    assert controller.create_workout(CreateWorkoutForm()) == "Please enter a workout name"

    controller.state.select_workout({"id": "missing", "name": "Gone", "workout_date": "2024-01-01"})
    error = controller.add_exercise(ExerciseForm(exercise_name="Squat", sets="3", reps="10", weight="1"))
    assert error == "Error adding exercise: Workout not found"


def test_controller_blocks_duplicate_submission(controller):
    with pytest.raises(DuplicateSubmission):
        controller.create_workout(CreateWorkoutForm(name="Legs", loading=True))

    controller.state.deleting = "w1"
    with pytest.raises(DuplicateSubmission):
        controller.delete_workout("w1")


class RefreshingAuth:
    def __init__(self, token="token-a", error=None):
        self.token = token
        self.error = error
        self.refreshed = []

    def refresh_session(self, session):
        self.refreshed.append(session.refresh_token)
        if self.error:
            raise self.error
        return Session(access_token=self.token, refresh_token="refresh-2", expires_at=time.time() + 3600)


def test_controller_refreshes_expired_session_before_calling(client):
    auth = RefreshingAuth()
    session = Session(access_token="stale", refresh_token="refresh-1", expires_at=time.time() - 60)
    controller = DashboardController(
        WorkoutApiClient("", "stale", http=client), session=session, auth=auth
    )

    controller.load_workouts()
    assert auth.refreshed == ["refresh-1"]
    assert controller.api.access_token == "token-a"
    assert controller.session.refresh_token == "refresh-2"
    assert not controller.state.loading

    assert controller.create_workout(CreateWorkoutForm(name="Legs", workout_date="2024-01-01")) is None
    assert auth.refreshed == ["refresh-1"]
    assert controller.state.workouts[0]["name"] == "Legs"


def test_controller_retries_once_after_unauthorized(client):
    auth = RefreshingAuth()
    session = Session(access_token="stale", refresh_token="refresh-1", expires_at=time.time() + 3600)
    controller = DashboardController(
        WorkoutApiClient("", "stale", http=client), session=session, auth=auth
    )

    assert controller.create_workout(CreateWorkoutForm(name="Legs", workout_date="2024-01-01")) is None
    assert auth.refreshed == ["refresh-1"]
    assert controller.api.access_token == "token-a"


def test_controller_reports_failed_refresh(client):
    auth = RefreshingAuth(error=AuthError("Invalid Refresh Token"))
    session = Session(access_token="stale", refresh_token="refresh-1", expires_at=time.time() - 60)
    controller = DashboardController(
        WorkoutApiClient("", "stale", http=client), session=session, auth=auth
    )

    error = controller.create_workout(CreateWorkoutForm(name="Legs", workout_date="2024-01-01"))
    assert error == "Error creating workout: Invalid token"
    assert controller.api.access_token == "stale"
