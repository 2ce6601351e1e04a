"""Saved-workout library commands: save, load, list, delete, share, import."""

from typing import Annotated, Optional

import typer
from rich.markup import escape

from ...io.serializers import ValidationError
from ...io.share import ShareError, get_share_registry, normalize_code
from .. import views
from ..app import DataDirOption, app, get_settings, get_store, write_text


@app.command()
def save(
    name: Annotated[
        Optional[str],
        typer.Argument(help="Name to save under (default: the currently loaded name)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Save the current workout text to the library.

    A workout with the same name (ignoring case) is replaced in place.
    """
    store = get_store(data_dir)
    if name is None:
        name = store.get_current_name()
        if name is None:
            name = views.console.input("Workout name: ").strip()

    replacing = store.find_workout(name) is not None if name else False
    try:
        workout = store.save_workout(name, store.load_text())
    except (ValidationError, OSError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    verb = "Updated" if replacing else "Saved"
    views.print_success(
        f"{verb} '{escape(workout.name)}' ({workout.exercise_count} exercise"
        f"{'s' if workout.exercise_count != 1 else ''})."
    )


@app.command()
def load(
    name: Annotated[str, typer.Argument(help="Saved workout name (case-insensitive)")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Load a saved workout into the editor, replacing the current text.
    """
    store = get_store(data_dir)
    workout = store.find_workout(name)
    if workout is None:
        views.print_error(f"No saved workout named '{escape(name)}'. See 'liftscript list'.")
        raise typer.Exit(1)

    write_text(store, None, workout.text)
    store.set_current_name(workout.name)
    views.print_success(f"Loaded '{escape(workout.name)}'.")


@app.command(name="list")
def list_workouts(
    data_dir: DataDirOption = None,
) -> None:
    """
    List saved workouts.
    """
    store = get_store(data_dir)
    workouts = store.load_saved_workouts()
    if not workouts:
        views.print_info("No saved workouts yet. Use 'liftscript save NAME'.")
        return
    views.console.print(views.format_saved_table(workouts, store.get_current_name()))


@app.command()
def delete(
    index: Annotated[int, typer.Argument(help="Workout number as shown by 'liftscript list'")],
    data_dir: DataDirOption = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
) -> None:
    """
    Delete a saved workout by its list number.
    """
    store = get_store(data_dir)
    workouts = store.load_saved_workouts()
    if index < 1 or index > len(workouts):
        views.print_error(f"No workout #{index} (library has {len(workouts)}).")
        raise typer.Exit(1)

    target = workouts[index - 1]
    if not yes and not views.confirm_action(f"Delete '{escape(target.name)}'?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        removed = store.delete_workout_at(index - 1)
    except OSError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    current = store.get_current_name()
    if current is not None and current.casefold() == removed.key:
        store.set_current_name(None)
    views.print_success(f"Deleted '{escape(removed.name)}'.")


@app.command()
def share(
    data_dir: DataDirOption = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Name shown to the recipient"),
    ] = None,
) -> None:
    """
    Publish the current workout and print a share code.
    """
    store = get_store(data_dir)
    settings = get_settings(data_dir)
    text = store.load_text()
    if not text.strip():
        views.print_error("Nothing to share: the current workout is empty.")
        raise typer.Exit(1)

    try:
        registry = get_share_registry(settings.share_backend, store.data_dir, settings.share_table)
        code = registry.publish(text, name or store.get_current_name())
    except ShareError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    views.print_success(f"Share code: [bold]{code}[/bold]")


@app.command(name="import")
def import_shared(
    code: Annotated[str, typer.Argument(help="Share code, e.g. K7MPQ2")],
    data_dir: DataDirOption = None,
) -> None:
    """
    Import a shared workout into the library and load it.
    """
    store = get_store(data_dir)
    settings = get_settings(data_dir)
    try:
        registry = get_share_registry(settings.share_backend, store.data_dir, settings.share_table)
    except ShareError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    shared = registry.resolve(code)
    if shared is None:
        views.print_error(f"Workout not found for code {normalize_code(code)}.")
        raise typer.Exit(1)

    try:
        workout = store.save_workout(shared["name"], shared["text"])
    except (ValidationError, OSError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    write_text(store, None, workout.text)
    views.print_success(f"Imported '{escape(workout.name)}'.")
