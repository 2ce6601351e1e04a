"""Shared Typer app object, shared option types, and store utilities."""

import logging
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.logging import RichHandler

from ..core.engine.config_loader import Settings, get_data_dir, load_settings
from ..io.workout_store import WorkoutStore
from . import views

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", help="Data directory (default: $LIFTSCRIPT_HOME or ~/.liftscript)"),
]

# Shared --file option: work on a text file instead of the stored workout
FileOption = Annotated[
    Optional[Path],
    typer.Option("--file", "-f", help="Read (and write back) this workout file instead of the current workout"),
]

app = typer.Typer(
    name="liftscript",
    help="Plain-text workout log: write sets as text, view trends, run guided sessions.",
    no_args_is_help=True,
)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging")] = False,
) -> None:
    """
    Plain-text workout log. Each exercise is a name line followed by one
    line of sets per day, e.g. "5*135*3"; a blank line starts the next exercise.
    """
    configure_logging(verbose)


def configure_logging(verbose: bool) -> None:
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=views.err_console, show_path=False)],
        force=True,
    )


def get_store(data_dir: Path | None) -> WorkoutStore:
    """Get workout store from path or default location."""
    return WorkoutStore(data_dir if data_dir is not None else get_data_dir())


def get_settings(data_dir: Path | None) -> Settings:
    return load_settings(data_dir)


def read_text(store: WorkoutStore, file: Path | None) -> str:
    """Workout text from --file when given, else the current workout."""
    if file is None:
        return store.load_text()
    try:
        return file.read_text(encoding="utf-8")
    except OSError as e:
        views.print_error(f"Cannot read {file}: {e}")
        raise typer.Exit(1)


def write_text(store: WorkoutStore, file: Path | None, text: str) -> None:
    """Write workout text back to --file or the current workout."""
    if file is not None:
        try:
            file.write_text(text, encoding="utf-8")
        except OSError as e:
            views.print_error(f"Cannot write {file}: {e}")
            raise typer.Exit(1)
        return
    if not store.save_text(text):
        views.print_error(f"Cannot write {store.text_path}")
        raise typer.Exit(1)
