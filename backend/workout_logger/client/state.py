"""
View models for the terminal front end.

Each screen keeps its transient state in one of these objects. State only
changes through the event methods; nothing is persisted between runs.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

Record = Dict[str, Any]


@dataclass
class AuthForm:
    is_sign_up: bool = False
    email: str = ""
    password: str = ""
    loading: bool = False
    error: str = ""

    @property
    def title(self) -> str:
        return "Create your account" if self.is_sign_up else "Sign in to continue"

    @property
    def submit_label(self) -> str:
        if self.loading:
            return "Loading..."
        return "Sign Up" if self.is_sign_up else "Sign In"

    def toggle_mode(self) -> None:
        self.is_sign_up = not self.is_sign_up
        self.error = ""

    def validate(self) -> Optional[str]:
        if not self.email or not self.password:
            return "Please fill in all fields"
        return None


@dataclass
class CreateWorkoutForm:
    name: str = ""
    workout_date: str = field(default_factory=lambda: date.today().isoformat())
    notes: str = ""
    loading: bool = False

    def validate(self) -> Optional[str]:
        if not self.name:
            return "Please enter a workout name"
        return None

    def payload(self) -> Record:
        return {"name": self.name, "workout_date": self.workout_date, "notes": self.notes}


@dataclass
class ExerciseForm:
    exercise_name: str = ""
    sets: str = ""
    reps: str = ""
    weight: str = ""
    loading: bool = False

    def validate(self) -> Optional[str]:
        if not (self.exercise_name and self.sets and self.reps and self.weight):
            return "Please fill in all fields"
        try:
            self.payload()
        except ValueError:
            return "Sets, reps and weight must be numbers"
        return None

    def payload(self) -> Record:
        return {
            "exercise_name": self.exercise_name,
            "sets": int(self.sets),
            "reps": int(self.reps),
            "weight": float(self.weight),
        }

    def clear(self) -> None:
        self.exercise_name = ""
        self.sets = ""
        self.reps = ""
        self.weight = ""


@dataclass
class WorkoutDetail:
    """The selected workout and its exercises."""
    workout: Record
    exercises: List[Record] = field(default_factory=list)
    loading: bool = True
    deleting: Optional[str] = None

    @property
    def exercise_count(self) -> int:
        return len(self.exercises)

    def exercises_loaded(self, exercises: List[Record]) -> None:
        self.exercises = list(exercises)
        self.loading = False

    def exercise_added(self, exercise: Record) -> None:
        self.exercises = self.exercises + [exercise]

    def exercise_deleted(self, exercise_id: str) -> None:
        self.exercises = [e for e in self.exercises if e["id"] != exercise_id]


@dataclass
class Dashboard:
    """Workout list, the selected workout and whether the create dialog is open."""
    workouts: List[Record] = field(default_factory=list)
    selected: Optional[WorkoutDetail] = None
    show_create_modal: bool = False
    loading: bool = True
    deleting: Optional[str] = None

    def workouts_loaded(self, workouts: List[Record]) -> None:
        self.workouts = list(workouts)
        self.loading = False

    def open_create_modal(self) -> None:
        self.show_create_modal = True

    def close_create_modal(self) -> None:
        self.show_create_modal = False

    def workout_created(self, workout: Record) -> None:
        workout = dict(workout)
        workout.setdefault("exercise_count", 0)
        self.workouts = [workout] + self.workouts
        self.show_create_modal = False
        self.select_workout(workout)

    def select_workout(self, workout: Record) -> None:
        self.selected = WorkoutDetail(workout=workout)

    def workout_deleted(self, workout_id: str) -> None:
        self.workouts = [w for w in self.workouts if w["id"] != workout_id]
        if self.selected and self.selected.workout["id"] == workout_id:
            self.selected = None

    def back(self) -> None:
        """Return to the list, carrying the detail view's exercise count back with it."""
        if self.selected and not self.selected.loading:
            workout_id = self.selected.workout["id"]
            for workout in self.workouts:
                if workout["id"] == workout_id:
                    workout["exercise_count"] = self.selected.exercise_count
        self.selected = None
