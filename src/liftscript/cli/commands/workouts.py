"""Workout text commands: show, days, steps, edit, new, log."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.markup import escape

from ...core.document import parse_workouts
from ...core.metrics import CARDIO_METRICS, METRICS
from ...core.session import build_session_steps
from ...core.writer import build_results_text, find_header, group_results
from ...io.serializers import ValidationError, parse_result_arg
from .. import views
from ..app import DataDirOption, FileOption, app, get_settings, get_store, read_text, write_text

_METRIC_KEYS = [m.key for m in METRICS] + [m.key for m in CARDIO_METRICS]


@app.command()
def show(
    data_dir: DataDirOption = None,
    file: FileOption = None,
    metric: Annotated[
        str,
        typer.Option("--metric", "-m", help=f"Trend metric: {', '.join(_METRIC_KEYS)}"),
    ] = "volume",
    chart: Annotated[bool, typer.Option("--chart/--no-chart", help="Draw trend charts")] = True,
    bars: Annotated[bool, typer.Option("--bars", help="Bar chart of latest values across exercises")] = False,
) -> None:
    """
    Show the workout formatted by exercise, with metric trends.
    """
    if metric not in _METRIC_KEYS:
        views.print_error(f"Unknown metric '{metric}'. Choose one of: {', '.join(_METRIC_KEYS)}")
        raise typer.Exit(1)

    store = get_store(data_dir)
    settings = get_settings(data_dir)
    document = parse_workouts(read_text(store, file))

    name = store.get_current_name() if file is None else file.name
    if name:
        views.console.print(f"[bold]{escape(name)}[/bold]\n")
    views.print_document(document, metric, settings, show_chart=chart)

    if bars:
        chosen = next((m for m in METRICS if m.key == metric), METRICS[0])
        views.print_latest_bars(document, chosen)


@app.command()
def days(
    data_dir: DataDirOption = None,
    file: FileOption = None,
) -> None:
    """
    Show the workout grouped by day (line N of every exercise = day N).
    """
    store = get_store(data_dir)
    document = parse_workouts(read_text(store, file))
    views.print_days(document, get_settings(data_dir))


@app.command()
def steps(
    data_dir: DataDirOption = None,
    file: FileOption = None,
) -> None:
    """
    List the sets a guided session will walk through (first line of each exercise).
    """
    store = get_store(data_dir)
    planned = build_session_steps(parse_workouts(read_text(store, file)))
    if not planned:
        views.print_info("No exercises with entries to run.")
        return
    views.console.print(views.format_steps_table(planned))


@app.command()
def edit(
    data_dir: DataDirOption = None,
    source: Annotated[
        Optional[Path],
        typer.Option("--from", help="Read the new text from this file (default: stdin)"),
    ] = None,
) -> None:
    """
    Replace the current workout text from a file or stdin.
    """
    store = get_store(data_dir)
    if source is not None:
        try:
            text = source.read_text(encoding="utf-8")
        except OSError as e:
            views.print_error(f"Cannot read {source}: {e}")
            raise typer.Exit(1)
    else:
        text = typer.get_text_stream("stdin").read()

    write_text(store, None, text)
    document = parse_workouts(text)
    views.print_success(
        f"Saved workout text ({document.exercise_count} exercise"
        f"{'s' if document.exercise_count != 1 else ''})."
    )


@app.command()
def new(
    data_dir: DataDirOption = None,
) -> None:
    """
    Start a new blank workout.
    """
    store = get_store(data_dir)
    write_text(store, None, "")
    store.set_current_name(None)
    views.print_success("Started a new blank workout.")


@app.command()
def log(
    results: Annotated[
        list[str],
        typer.Argument(help="Results as Exercise=reps*weight[*sets], e.g. Squat=5*135 'Pull-ups=12BW'"),
    ],
    data_dir: DataDirOption = None,
    file: FileOption = None,
) -> None:
    """
    Add results below each exercise's latest entry.
    """
    parsed = []
    for arg in results:
        try:
            parsed.extend(parse_result_arg(arg))
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)

    store = get_store(data_dir)
    text = read_text(store, file)
    lines = text.split("\n")
    for group in group_results(parsed):
        if find_header(lines, group.name) is None:
            views.print_warning(f"No exercise named '{escape(group.name)}'; skipped.")

    write_text(store, file, build_results_text(parsed, text))
    views.print_success(f"Logged {len(parsed)} set{'s' if len(parsed) != 1 else ''}.")
