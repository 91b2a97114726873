"""HTTP client for the Workout Logger API."""

import logging
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """The API answered with an error body, or could not be reached."""

    def __init__(self, status_code: Optional[int], message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class WorkoutApiClient:
    """
    One method per API route. Every call carries the session's bearer token.

    ``http`` may be any object with a requests-style ``request`` method,
    so tests can hand in the application's TestClient.
    """

    def __init__(self, base_url: str, access_token: str, http=None, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.http = http or requests.Session()
        self.timeout = timeout

    def _request(self, method: str, path: str, payload: Optional[dict] = None) -> Dict[str, Any]:
        try:
            response = self.http.request(
                method,
                f"{self.base_url}{path}",
                json=payload,
                headers={"Authorization": f"Bearer {self.access_token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise ApiError(None, f"Could not reach the API: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = {}

        if response.status_code >= 400:
            message = body.get("error") if isinstance(body, dict) else None
            raise ApiError(response.status_code, message or f"HTTP {response.status_code}")
        return body

    def health(self) -> Dict[str, Any]:
        return self._request("GET", "/api/health")

    # Workouts

    def list_workouts(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/workouts")["workouts"]

    def get_workout(self, workout_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/api/workouts/{workout_id}")["workout"]

    def create_workout(self, name: str, workout_date: str, notes: Optional[str] = None) -> Dict[str, Any]:
        payload = {"name": name, "workout_date": workout_date, "notes": notes}
        return self._request("POST", "/api/workouts", payload)["workout"]

    def update_workout(self, workout_id: str, **fields) -> Dict[str, Any]:
        return self._request("PATCH", f"/api/workouts/{workout_id}", fields)["workout"]

    def delete_workout(self, workout_id: str) -> str:
        return self._request("DELETE", f"/api/workouts/{workout_id}")["message"]

    # Exercises

    def list_exercises(self, workout_id: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"/api/workouts/{workout_id}/exercises")["exercises"]

    def add_exercise(self, workout_id: str, exercise_name: str, sets, reps, weight) -> Dict[str, Any]:
        payload = {"exercise_name": exercise_name, "sets": sets, "reps": reps, "weight": weight}
        return self._request("POST", f"/api/workouts/{workout_id}/exercises", payload)["exercise"]

    def update_exercise(self, exercise_id: str, **fields) -> Dict[str, Any]:
        return self._request("PATCH", f"/api/exercises/{exercise_id}", fields)["exercise"]

    def delete_exercise(self, exercise_id: str) -> str:
        return self._request("DELETE", f"/api/exercises/{exercise_id}")["message"]
