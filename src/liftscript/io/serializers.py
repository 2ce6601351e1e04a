"""
JSON serialization for stored records.

Handles conversion between dataclasses and JSON-compatible dicts, plus
parsing of the small text formats the CLI accepts.
"""

import json
import math
from typing import Any

from ..core.grammar import parse_single_set
from ..core.models import SavedWorkout, SessionResult


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_name(name: str) -> str:
    """
    Validate a workout or exercise name.

    Args:
        name: Name to validate

    Returns:
        The name with surrounding whitespace removed

    Raises:
        ValidationError: If the name is empty
    """
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"Invalid name: {name!r}. Must be a non-empty string.")
    return name.strip()


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is a non-negative number.

    Raises:
        ValidationError: If value is negative or not a number
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{name} must be a number, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValidationError(f"{name} must be finite, got {value}")
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


def saved_workout_to_dict(workout: SavedWorkout) -> dict[str, Any]:
    """
    Convert SavedWorkout to a JSON-compatible dict.

    Keys follow the stored format: name, text, exerciseCount, savedAt.
    """
    return {
        "name": workout.name,
        "text": workout.text,
        "exerciseCount": workout.exercise_count,
        "savedAt": workout.saved_at,
    }


def dict_to_saved_workout(data: dict[str, Any]) -> SavedWorkout:
    """
    Convert a stored dict to SavedWorkout.

    Raises:
        ValidationError: If required fields are missing or invalid
    """
    if not isinstance(data, dict):
        raise ValidationError(f"Saved workout must be an object, got {type(data).__name__}")
    try:
        name = validate_name(data["name"])
        text = data["text"]
    except KeyError as e:
        raise ValidationError(f"Missing required field: {e}") from e
    if not isinstance(text, str):
        raise ValidationError("text must be a string")

    count = validate_non_negative(data.get("exerciseCount", 0), "exerciseCount")
    saved_at = validate_non_negative(data.get("savedAt", 0), "savedAt")
    return SavedWorkout(name=name, text=text, exercise_count=int(count), saved_at=int(saved_at))


def saved_workouts_to_json(workouts: list[SavedWorkout]) -> str:
    return json.dumps([saved_workout_to_dict(w) for w in workouts], indent=2)


def json_to_saved_workouts(raw: str) -> list[SavedWorkout]:
    """
    Parse a saved-workouts JSON document.

    Raises:
        ValidationError: If the JSON is invalid or any record is malformed
    """
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, list):
        raise ValidationError("Saved workouts must be a JSON list")
    return [dict_to_saved_workout(item) for item in data]


def parse_result_arg(arg: str) -> list[SessionResult]:
    """
    Parse a command-line result of the form "Exercise=reps*weight[*sets]".

    Examples:
        "Squat=5*135"   -> one result: Squat, 5 reps, 135
        "Squat=5*135*3" -> three identical results
        "Pull-ups=12BW" -> one result: Pull-ups, 12 reps, bodyweight

    Raises:
        ValidationError: If the argument is malformed
    """
    name, sep, value = arg.rpartition("=")
    if not sep:
        raise ValidationError(f"Invalid result '{arg}'. Use Exercise=reps*weight, e.g. Squat=5*135")
    name = validate_name(name)
    parsed = parse_single_set(value)
    if parsed is None:
        raise ValidationError(
            f"Invalid set '{value}' for {name}. Use reps*weight (e.g. 5*135) or repsBW (e.g. 12BW)."
        )
    return [
        SessionResult(exercise=name, reps=parsed.reps, weight=parsed.weight)
        for _ in range(parsed.repeat_count)
    ]
