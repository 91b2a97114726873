"""Interactive terminal front end (``workout-logger``)."""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.prompt import Confirm, Prompt
from rich.table import Table
from rich.text import Text

from workout_logger.client.api import WorkoutApiClient
from workout_logger.client.auth import AuthClient, Session
from workout_logger.client.controller import DashboardController, submit_auth
from workout_logger.client.state import (
    AuthForm,
    CreateWorkoutForm,
    ExerciseForm,
    WorkoutDetail,
)
from workout_logger.config import get_settings

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    return date.fromisoformat(str(value)[:10])


def short_date(value: str) -> str:
    d = _parse_date(value)
    return f"{d.month}/{d.day}/{d.year}"


def long_date(value: str) -> str:
    d = _parse_date(value)
    return f"{d:%A, %B} {d.day}, {d.year}"


def pluralize(count: int, word: str) -> str:
    return f"{count} {word if count == 1 else word + 's'}"


def render_workouts(workouts: List[Dict[str, Any]]):
    if not workouts:
        return Panel(
            Text("No workouts yet\nCreate your first workout to get started!", justify="center"),
            title="My Workouts"
        )

    table = Table(title="My Workouts", show_lines=True)
    table.add_column("#", justify="right")
    table.add_column("Workout")
    table.add_column("Date")
    table.add_column("Exercises")
    table.add_column("Notes")
    for index, workout in enumerate(workouts, 1):
        table.add_row(
            str(index),
            workout["name"],
            short_date(workout["workout_date"]),
            pluralize(workout.get("exercise_count", 0), "exercise"),
            workout.get("notes") or "",
        )
    return table


def render_exercises(exercises: List[Dict[str, Any]]):
    if not exercises:
        return Text("No exercises logged yet. Add your first exercise!")

    table = Table()
    table.add_column("#", justify="right")
    table.add_column("Exercise")
    table.add_column("Sets", justify="right")
    table.add_column("Reps", justify="right")
    table.add_column("Weight (kg)", justify="right")
    for index, exercise in enumerate(exercises, 1):
        table.add_row(
            str(index),
            exercise["exercise_name"],
            str(exercise["sets"]),
            str(exercise["reps"]),
            f"{exercise['weight']:g}",
        )
    return table


def render_workout_detail(detail: WorkoutDetail):
    workout = detail.workout
    header = Text()
    header.append(f"{workout['name']}\n", style="bold")
    header.append(long_date(workout["workout_date"]))
    if workout.get("notes"):
        header.append(f"\n{workout['notes']}")
    header.append(f"\n\n{pluralize(detail.exercise_count, 'Exercise')}", style="bold")

    body = Text("Loading exercises...") if detail.loading else render_exercises(detail.exercises)
    return Group(Panel(header), body)


def _pick(items: List[Dict[str, Any]], label: str) -> Optional[Dict[str, Any]]:
    if not items:
        return None
    choice = Prompt.ask(f"{label} number", default="")
    if not choice.isdigit() or not 1 <= int(choice) <= len(items):
        return None
    return items[int(choice) - 1]


class TerminalApp:
    """Screens: sign in, workout list, workout detail."""

    def __init__(self, auth: AuthClient, api_url: str, console: Optional[Console] = None):
        self.auth = auth
        self.api_url = api_url
        self.console = console or Console()

    def alert(self, message: str) -> None:
        self.console.print(f"[red]{message}[/red]")

    def sign_in(self) -> Optional[Session]:
        form = AuthForm()
        while True:
            self.console.print(Panel(Text(f"Workout Logger\n{form.title}", justify="center")))
            action = Prompt.ask(
                "Choose",
                choices=["submit", "switch", "quit"],
                default="submit"
            )
            if action == "quit":
                return None
            if action == "switch":
                form.toggle_mode()
                continue

            form.email = Prompt.ask("Email")
            form.password = Prompt.ask("Password", password=True)
            session = submit_auth(form, self.auth)
            if session:
                return session
            if form.error:
                self.alert(form.error)

    def run(self) -> None:
        session = self.sign_in()
        if session is None:
            return

        controller = DashboardController(
            WorkoutApiClient(self.api_url, session.access_token),
            session=session,
            auth=self.auth,
        )
        controller.load_workouts()
        self.console.print(f"Signed in as {session.email}")

        while True:
            detail = controller.state.selected
            if detail is not None:
                self.workout_screen(controller, detail)
                continue

            self.console.print(render_workouts(controller.state.workouts))
            action = Prompt.ask(
                "Choose",
                choices=["new", "open", "delete", "refresh", "signout"],
                default="open"
            )
            if action == "signout":
                self.auth.sign_out(controller.session)
                return
            if action == "refresh":
                controller.load_workouts()
            elif action == "new":
                self.create_workout(controller)
            elif action == "open":
                workout = _pick(controller.state.workouts, "Workout")
                if workout:
                    controller.select_workout(workout["id"])
            elif action == "delete":
                workout = _pick(controller.state.workouts, "Workout")
                if workout and Confirm.ask(
                    "Are you sure? This will delete the workout and all its exercises."
                ):
                    error = controller.delete_workout(workout["id"])
                    if error:
                        self.alert(error)

    def create_workout(self, controller: DashboardController) -> None:
        controller.state.open_create_modal()
        form = CreateWorkoutForm()
        form.name = Prompt.ask("Workout name (e.g., Chest & Triceps)", default="")
        form.workout_date = Prompt.ask("Date", default=form.workout_date)
        form.notes = Prompt.ask("Notes (optional)", default="")
        error = controller.create_workout(form)
        if error:
            self.alert(error)
            controller.state.close_create_modal()

    def workout_screen(self, controller: DashboardController, detail: WorkoutDetail) -> None:
        self.console.print(render_workout_detail(detail))
        action = Prompt.ask("Choose", choices=["add", "delete", "back"], default="add")
        if action == "back":
            controller.back()
        elif action == "add":
            form = ExerciseForm(
                exercise_name=Prompt.ask("Exercise name", default=""),
                sets=Prompt.ask("Sets", default=""),
                reps=Prompt.ask("Reps", default=""),
                weight=Prompt.ask("Weight (kg)", default=""),
            )
            error = controller.add_exercise(form)
            if error:
                self.alert(error)
        elif action == "delete":
            exercise = _pick(detail.exercises, "Exercise")
            if exercise and Confirm.ask("Delete this exercise?"):
                error = controller.delete_exercise(exercise["id"])
                if error:
                    self.alert(error)


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    auth = AuthClient(settings.supabase_url, settings.supabase_anon_key)
    TerminalApp(auth, settings.api_url).run()


if __name__ == "__main__":
    main()
