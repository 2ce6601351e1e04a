"""Guided session command: run."""

import time

import typer

from ...core.config import TICK_SECONDS
from ...core.document import parse_workouts
from ...core.models import SessionResult
from ...core.session import (
    ConfirmBack,
    ConfirmDiscard,
    ConfirmSave,
    EmptySessionError,
    EndRequest,
    SessionRunner,
    SkipRest,
    Submit,
    Tick,
)
from ...core.writer import build_results_text
from ...io.notifications import NullNotifier, TimerNotifier
from .. import views
from ..app import DataDirOption, FileOption, app, get_settings, get_store, read_text, write_text

# Clock used for the rest countdown; replaced in tests
_sleep = time.sleep

_END_WORDS = ("q", "quit", "end")


def _input_phase(runner: SessionRunner) -> None:
    state = runner.state
    views.print_step_card(state)
    prefill = state.prefill()
    raw = views.console.input(f"Reps * Weight [{prefill}] (q to end): ").strip()
    if raw.lower() in _END_WORDS:
        runner.dispatch(EndRequest())
        return
    runner.dispatch(Submit(raw or prefill))


def _rest_phase(runner: SessionRunner) -> None:
    try:
        with views.console.status(views.rest_status_text(runner.state)) as status:
            while runner.phase == "rest":
                _sleep(TICK_SECONDS)
                runner.dispatch(Tick())
                status.update(views.rest_status_text(runner.state))
    except KeyboardInterrupt:
        choice = views.console.input("\n\\[s] skip rest  \\[e] end session  \\[Enter] keep resting: ").strip().lower()
        if choice == "s":
            runner.dispatch(SkipRest())
        elif choice == "e":
            runner.dispatch(EndRequest())


def _confirm_phase(runner: SessionRunner) -> None:
    results = runner.state.results
    views.console.print()
    views.console.print("[bold]End session?[/bold]")
    if results:
        exercises = {r.exercise.casefold() for r in results}
        views.console.print(
            f"You've completed {len(results)} set{'s' if len(results) != 1 else ''} across "
            f"{len(exercises)} exercise{'s' if len(exercises) != 1 else ''}."
        )
        choice = views.console.input("\\[s] save completed sets  \\[d] discard all  \\[b] go back: ").strip().lower()
    else:
        views.console.print("No sets completed yet.")
        choice = views.console.input("\\[d] end session  \\[b] go back: ").strip().lower()

    if choice == "s" and results:
        runner.dispatch(ConfirmSave())
    elif choice == "d":
        runner.dispatch(ConfirmDiscard())
    else:
        runner.dispatch(ConfirmBack())


@app.command()
def run(
    data_dir: DataDirOption = None,
    file: FileOption = None,
) -> None:
    """
    Run a guided session over the first line of each exercise.

    Results are written back under each exercise as a new line.
    """
    store = get_store(data_dir)
    settings = get_settings(data_dir)
    text = read_text(store, file)

    def on_complete(results: list[SessionResult]) -> None:
        write_text(store, file, build_results_text(results, text))
        views.console.print()
        views.print_success(f"Workout complete. Saved {len(results)} set{'s' if len(results) != 1 else ''}.")

    def on_cancel() -> None:
        views.console.print()
        views.print_info("Session ended. Nothing saved.")

    notifier = TimerNotifier(views.console.bell) if settings.notifications else NullNotifier()
    try:
        runner = SessionRunner(parse_workouts(text), on_complete, on_cancel, notifier=notifier)
    except EmptySessionError as e:
        views.print_info(str(e))
        raise typer.Exit(0)

    phases = {
        "input": _input_phase,
        "rest": _rest_phase,
        "confirm": _confirm_phase,
    }
    try:
        while not runner.state.is_finished:
            phases[runner.phase](runner)
    finally:
        notifier.cancel_scheduled()
