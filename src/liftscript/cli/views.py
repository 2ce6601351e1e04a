"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of parsed workouts, day views,
session steps and the saved-workout library.
"""

from datetime import date, datetime

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.ascii_plot import create_simple_bar_chart, create_trend_plot
from ..core.days import group_by_day
from ..core.engine.config_loader import Settings
from ..core.formatting import (
    format_cardio_time,
    format_date,
    format_entry_summary,
    format_rest,
    format_set,
    format_timer,
    get_auto_date,
)
from ..core.metrics import (
    MetricDef,
    MetricTrend,
    is_bodyweight_only,
    metric_series,
    metric_trend,
)
from ..core.models import Document, Exercise, SavedWorkout, SessionStep, format_number
from ..core.session import SessionState, format_pair

console = Console()
err_console = Console(stderr=True)


def _metric_unit(metric: MetricDef, settings: Settings) -> str:
    if metric.unit == "weight":
        return settings.weight_unit
    if metric.unit == "distance":
        return settings.distance_unit
    return metric.unit


def format_metric_value(value: float, metric: MetricDef, settings: Settings) -> str:
    """Render a metric value with its unit, e.g. "2,025", "24:30", "3.1 mi"."""
    if metric.key == "time":
        return format_cardio_time(int(value))
    if metric.key == "pace":
        return f"{format_cardio_time(int(round(value)))} /{settings.distance_unit}"
    text = format_number(round(value, 2))
    unit = _metric_unit(metric, settings)
    return f"{text} {unit}" if unit else text


def _fmt_trend(trend: MetricTrend, settings: Settings) -> str:
    if trend.latest is None:
        return ""
    text = f"{trend.metric.label}: [bold]{format_metric_value(trend.latest, trend.metric, settings)}[/bold]"
    diff = trend.diff
    if diff:
        arrow, style = ("▲", "green") if diff > 0 else ("▼", "red")
        text += f"  [{style}]{arrow} {format_metric_value(abs(diff), trend.metric, settings)}[/{style}]"
    return text


def print_exercise(
    exercise: Exercise,
    metric: str,
    settings: Settings,
    show_chart: bool = True,
    today: date | None = None,
) -> None:
    """
    Print one exercise card: header, trend, chart and dated entries.

    Args:
        exercise: Exercise to display
        metric: Requested metric key (resolved per exercise type)
        settings: Units for labels
        show_chart: Draw the ASCII trend chart when there are 2+ entries
        today: Date of the newest entry (default: today)
    """
    header = f"[bold cyan]{escape(exercise.name)}[/bold cyan]"
    rest = format_rest(exercise.rest_seconds)
    if rest:
        header += f"  [dim]{rest}[/dim]"
    console.print(header)
    if exercise.note:
        console.print(f"  [italic]{escape(exercise.note)}[/italic]")

    if not exercise.entries:
        console.print("  [dim italic]No entries yet[/dim italic]")
        console.print()
        return

    bw_only = is_bodyweight_only(exercise)
    if bw_only and metric == "max_weight" and not exercise.is_cardio:
        console.print("  [dim italic]Bodyweight exercise: try volume or total_reps[/dim italic]")
    else:
        trend = metric_trend(exercise, metric, settings.distance_unit)  # type: ignore[arg-type]
        console.print(f"  {_fmt_trend(trend, settings)}")
        if show_chart and len(exercise.entries) >= 2:
            values = metric_series(exercise, metric, settings.distance_unit)  # type: ignore[arg-type]
            n = len(values)
            dates = [get_auto_date(i, n, today) for i in range(n)]
            chart = create_trend_plot(values, dates, title=f"{trend.metric.label} ({exercise.name})")
            console.print(chart, markup=False, highlight=False)

    total = len(exercise.entries)
    for i, entry in enumerate(exercise.entries):
        day = format_date(get_auto_date(i, total, today))
        console.print(f"  [dim]{day}[/dim]  {format_entry_summary(entry.sets, settings.weight_unit)}")
        if len(entry.sets) > 1 or any(getattr(s, "repeat_count", 1) > 1 for s in entry.sets):
            for n, s in enumerate(entry.sets, 1):
                line = f"      [dim]{n}.[/dim] {format_set(s, settings.weight_unit)}"
                set_rest = format_rest(s.rest_seconds)
                if set_rest:
                    line += f"  [dim]{set_rest}[/dim]"
                console.print(line)
        if entry.note:
            console.print(f"      [italic]{escape(entry.note)}[/italic]")
    console.print()


def print_document(
    document: Document,
    metric: str,
    settings: Settings,
    show_chart: bool = True,
    today: date | None = None,
) -> None:
    """Print every exercise of a document, exercise-major."""
    if not len(document):
        console.print("[yellow]No workouts yet. Write one with 'liftscript edit'.[/yellow]")
        return
    for exercise in document:
        print_exercise(exercise, metric, settings, show_chart=show_chart, today=today)


def print_days(document: Document, settings: Settings, today: date | None = None) -> None:
    """Print the day-major view, newest day last."""
    days = group_by_day(document)
    if not days:
        console.print("[yellow]No entries recorded yet.[/yellow]")
        return

    for day in days:
        label = format_date(get_auto_date(day.day_index, day.total_days, today))
        table = Table(title=f"Day {day.day_index + 1} of {day.total_days} · {label}", title_justify="left")
        table.add_column("Exercise", style="cyan")
        table.add_column("Sets")
        table.add_column("Rest", style="dim")
        table.add_column("Note", style="italic")
        for item in day.items:
            table.add_row(
                escape(item.name),
                "\n".join(format_set(s, settings.weight_unit) for s in item.sets),
                format_rest(item.rest_seconds) or "",
                escape(item.note or ""),
            )
        console.print(table)


def print_latest_bars(document: Document, metric: MetricDef) -> None:
    """Bar chart of each exercise's latest value for one metric."""
    labels: list[str] = []
    values: list[float] = []
    for ex in document:
        if not ex.entries or ex.is_cardio:
            continue
        labels.append(ex.name)
        values.append(metric_series(ex, metric.key)[-1])
    if labels:
        console.print(create_simple_bar_chart(labels, values, title=f"Latest {metric.label}"), markup=False)


def format_steps_table(steps: list[SessionStep]) -> Table:
    """
    Create a Rich table of guided-session steps.

    Args:
        steps: Steps in execution order

    Returns:
        Rich Table object
    """
    table = Table(title="Session Steps")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="cyan")
    table.add_column("Set", justify="right")
    table.add_column("Suggested", style="bold")
    table.add_column("Rest", justify="right", style="dim")

    for i, step in enumerate(steps, 1):
        table.add_row(
            str(i),
            escape(step.exercise),
            f"{step.rep_index + 1}/{step.total_for_segment}",
            format_pair(step.suggested_reps, step.suggested_weight),
            f"{step.rest_seconds}s" if step.rest_seconds else "-",
        )
    return table


def format_saved_table(workouts: list[SavedWorkout], current: str | None = None) -> Table:
    """Create a Rich table of the saved-workout library."""
    table = Table(title="Saved Workouts")
    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Name", style="cyan")
    table.add_column("Exercises", justify="right")
    table.add_column("Saved", style="dim")

    current_key = current.casefold() if current else None
    for i, w in enumerate(workouts, 1):
        name = f"{escape(w.name)} [green]●[/green]" if w.key == current_key else escape(w.name)
        saved = datetime.fromtimestamp(w.saved_at / 1000).strftime("%Y-%m-%d %H:%M") if w.saved_at else "-"
        count = f"{w.exercise_count} exercise{'s' if w.exercise_count != 1 else ''}"
        table.add_row(str(i), name, count, saved)
    return table


def print_step_card(state: SessionState) -> None:
    """Header shown before asking for the current step's result."""
    step = state.current_step
    if step is None:
        return
    done, total = state.exercise_progress()
    console.print()
    console.print(f"[bold cyan]{escape(step.exercise)}[/bold cyan]  [dim]Set {done} of {total}[/dim]")


def rest_status_text(state: SessionState) -> str:
    """Status line shown while resting."""
    step = state.current_step
    text = f"[bold]REST[/bold] {format_timer(state.timer)} / {format_timer(state.rest_total)}"
    if step is not None:
        done, _ = state.exercise_progress()
        text += f"  [dim]Next: {escape(step.exercise)} · Set {done}[/dim]"
    return text + "  [dim](Ctrl+C for options)[/dim]"


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} \\[y/N]: ")
    return response.lower() in ("y", "yes")
