"""
Document builder.

Turns raw workout text into a Document with a single top-to-bottom fold
over its lines. The fold state carries the exercises built so far and
whether the last one is still "open" (receiving entries and notes); a
blank line closes it.

Parsing is total: any text yields a Document, at worst with misread or
empty exercises.
"""

import logging
from dataclasses import dataclass, replace
from functools import reduce

from .config import IMPLICIT_EXERCISE_NAME, NOTE_SEPARATOR
from .grammar import parse_entry_line
from .lines import classify_line, header_name
from .models import Document, Entry, Exercise

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildState:
    """Accumulator for the line fold."""

    exercises: tuple[Exercise, ...] = ()
    open: bool = False  # exercises[-1] is the current exercise

    @property
    def current(self) -> Exercise | None:
        return self.exercises[-1] if self.open else None

    def with_current(self, exercise: Exercise) -> "BuildState":
        return replace(self, exercises=self.exercises[:-1] + (exercise,))

    def with_new(self, exercise: Exercise) -> "BuildState":
        return BuildState(exercises=self.exercises + (exercise,), open=True)


def _join_note(existing: str | None, note: str) -> str:
    return existing + NOTE_SEPARATOR + note if existing else note


def attach_note(exercise: Exercise, note: str) -> Exercise:
    """Attach a comment line to the last entry, or to the exercise if it has none."""
    if exercise.entries:
        last = exercise.entries[-1]
        last = replace(last, note=_join_note(last.note, note))
        return replace(exercise, entries=exercise.entries[:-1] + (last,))
    return replace(exercise, note=_join_note(exercise.note, note))


def fold_line(state: BuildState, line: str) -> BuildState:
    """
    Apply one raw line to the build state.

    1. blank line   -> close the current exercise
    2. comment line -> note on the current exercise (dropped if none)
    3. set data     -> new entry (opens an implicit "Unnamed" exercise if needed)
    4. otherwise    -> new exercise header
    """
    classified = classify_line(line)

    if classified.kind == "blank":
        return replace(state, open=False) if state.open else state

    if classified.kind == "comment":
        current = state.current
        if current is None:
            logger.debug("Dropping comment with no exercise: %r", classified.note)
            return state
        return state.with_current(attach_note(current, classified.note or ""))

    sets = parse_entry_line(classified.content)
    if sets is not None:
        entry = Entry(sets=tuple(sets), note=classified.note)
        current = state.current
        if current is None:
            return state.with_new(Exercise(name=IMPLICIT_EXERCISE_NAME, entries=(entry,)))
        return state.with_current(replace(current, entries=current.entries + (entry,)))

    name, rest = header_name(classified.content)
    return state.with_new(Exercise(name=name, note=classified.note, rest_seconds=rest))


def parse_workouts(text: str) -> Document:
    """
    Parse workout text into a Document.

    Args:
        text: Raw newline-delimited workout text

    Returns:
        Document with exercises in first-appearance order
    """
    state = reduce(fold_line, text.split("\n"), BuildState())
    return Document(exercises=state.exercises)
