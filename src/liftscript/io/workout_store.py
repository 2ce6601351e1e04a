"""
File-based storage for workout text and the saved-workout library.

Layout of the data directory:
    current.txt          the text being edited
    saved_workouts.json  list of {name, text, exerciseCount, savedAt}
    state.json           currently loaded name, onboarding flag
"""

import json
import logging
import time
from pathlib import Path

from ..core.config import ONBOARDING_TEXT
from ..core.document import parse_workouts
from ..core.models import SavedWorkout, name_key
from .serializers import (
    ValidationError,
    json_to_saved_workouts,
    saved_workouts_to_json,
    validate_name,
)

logger = logging.getLogger(__name__)


class WorkoutStore:
    """
    Manages the current workout text and saved workouts on disk.

    load_* methods never raise: a missing or corrupt file yields an empty
    default. save_* methods return True on success, False (and log) on
    failure.
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding the store files
        """
        self.data_dir = Path(data_dir)
        self.text_path = self.data_dir / "current.txt"
        self.saved_path = self.data_dir / "saved_workouts.json"
        self.state_path = self.data_dir / "state.json"

    def init(self) -> None:
        """Create the data directory if needed."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    # ---------------------------------------------------------------------
    # Current text
    # ---------------------------------------------------------------------

    def load_text(self) -> str:
        """
        Load the current workout text.

        On first run (no text and onboarding not yet seen) seeds the
        onboarding sample and marks onboarding as seen.
        """
        if not self.text_path.exists():
            if not self._load_state().get("seenOnboarding"):
                self._update_state(seenOnboarding=True)
                self.save_text(ONBOARDING_TEXT)
                return ONBOARDING_TEXT
            return ""
        try:
            return self.text_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Could not read %s: %s", self.text_path, e)
            return ""

    def save_text(self, text: str) -> bool:
        """Persist the current workout text verbatim."""
        try:
            self.init()
            self.text_path.write_text(text, encoding="utf-8")
            return True
        except OSError as e:
            logger.warning("Could not write %s: %s", self.text_path, e)
            return False

    # ---------------------------------------------------------------------
    # Saved workouts
    # ---------------------------------------------------------------------

    def load_saved_workouts(self) -> list[SavedWorkout]:
        """Load the saved-workout library (empty when missing or corrupt)."""
        if not self.saved_path.exists():
            return []
        try:
            return json_to_saved_workouts(self.saved_path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning("Could not load saved workouts from %s: %s", self.saved_path, e)
            return []

    def save_saved_workouts(self, workouts: list[SavedWorkout]) -> bool:
        """Replace the saved-workout library."""
        try:
            self.init()
            self.saved_path.write_text(saved_workouts_to_json(workouts), encoding="utf-8")
            return True
        except OSError as e:
            logger.warning("Could not write %s: %s", self.saved_path, e)
            return False

    def find_workout(self, name: str) -> SavedWorkout | None:
        """Look up a saved workout by name, ignoring case."""
        key = name_key(name)
        for w in self.load_saved_workouts():
            if w.key == key:
                return w
        return None

    def save_workout(self, name: str, text: str) -> SavedWorkout:
        """
        Save text under a name, replacing any workout with the same name
        (case-insensitive) in place.

        The new record keeps the casing given here. Also records the name
        as the currently loaded workout.

        Raises:
            ValidationError: If the name is empty
            OSError: If the library cannot be written
        """
        name = validate_name(name)
        workout = SavedWorkout(
            name=name,
            text=text,
            exercise_count=parse_workouts(text).exercise_count,
            saved_at=int(time.time() * 1000),
        )
        workouts = self.load_saved_workouts()
        for i, existing in enumerate(workouts):
            if existing.key == workout.key:
                workouts[i] = workout
                break
        else:
            workouts.append(workout)

        if not self.save_saved_workouts(workouts):
            raise OSError(f"Could not write {self.saved_path}")
        self.set_current_name(name)
        return workout

    def delete_workout_at(self, index: int) -> SavedWorkout:
        """
        Delete the saved workout at the given 0-based index.

        Raises:
            IndexError: If index is out of range
        """
        workouts = self.load_saved_workouts()
        if index < 0 or index >= len(workouts):
            raise IndexError(f"Workout index {index} out of range (0-{len(workouts) - 1})")
        removed = workouts.pop(index)
        if not self.save_saved_workouts(workouts):
            raise OSError(f"Could not write {self.saved_path}")
        return removed

    # ---------------------------------------------------------------------
    # Editor state
    # ---------------------------------------------------------------------

    def get_current_name(self) -> str | None:
        """Name of the saved workout currently loaded, if any."""
        name = self._load_state().get("currentName")
        return name if isinstance(name, str) and name else None

    def set_current_name(self, name: str | None) -> None:
        self._update_state(currentName=name)

    def _load_state(self) -> dict:
        if not self.state_path.exists():
            return {}
        try:
            with open(self.state_path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return data if isinstance(data, dict) else {}
        except (OSError, ValueError) as e:  # ValueError: bad JSON or bad UTF-8
            logger.warning("Could not read %s: %s", self.state_path, e)
            return {}

    def _update_state(self, **values) -> None:
        data = self._load_state()
        data.update(values)
        try:
            self.init()
            with open(self.state_path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.warning("Could not write %s: %s", self.state_path, e)
