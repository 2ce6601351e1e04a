"""
Data models for liftscript.

All core dataclasses representing parsed workout text and the views
derived from it. Every model is a frozen snapshot: documents are rebuilt
from the raw text on each change, never patched in place.

Weight is a tagged union (Numeric | Bodyweight) so that bodyweight work
is never confused with an external load of 0.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Literal, Union

from .config import BODYWEIGHT_TOKEN, DISTANCE_UNITS

DistanceUnit = Literal["mi", "km", "m"]


def format_number(value: float) -> str:
    """Render a number without a trailing '.0' or exponent (135.0 -> '135', 1e-05 -> '0.00001')."""
    if float(value).is_integer():
        return str(int(value))
    return format(Decimal(repr(float(value))), "f")


@dataclass(frozen=True)
class Numeric:
    """An external load, in the user's weight unit."""

    value: float

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("weight must be non-negative")

    def __str__(self) -> str:
        return format_number(self.value)


@dataclass(frozen=True)
class Bodyweight:
    """No external load: the set was done with bodyweight only."""

    def __str__(self) -> str:
        return BODYWEIGHT_TOKEN


BODYWEIGHT = Bodyweight()

Weight = Union[Numeric, Bodyweight]


@dataclass(frozen=True)
class WorkoutSet:
    """
    A batch of identical strength sets, e.g. "5*135*3".

    repeat_count is how many times the set is performed; rest_seconds is the
    per-set rest override (None = fall back to the exercise default).
    """

    reps: int
    weight: Weight
    repeat_count: int = 1
    rest_seconds: int | None = None

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.reps < 0:
            raise ValueError("reps must be non-negative")
        if self.repeat_count < 1:
            raise ValueError("repeat_count must be at least 1")
        if self.rest_seconds is not None and self.rest_seconds <= 0:
            raise ValueError("rest_seconds must be positive")
        if not isinstance(self.weight, (Numeric, Bodyweight)):
            raise ValueError(f"Invalid weight: {self.weight!r}")


@dataclass(frozen=True)
class CardioSet:
    """
    One cardio effort, e.g. "3.2mi 24:30 c300".

    At least one of distance, time_seconds and calories is present.
    """

    distance: float | None = None
    distance_unit: DistanceUnit | None = None
    time_seconds: int | None = None
    calories: int | None = None
    rest_seconds: int | None = None

    def __post_init__(self) -> None:
        """Validate cardio data."""
        if self.distance is None and self.time_seconds is None and self.calories is None:
            raise ValueError("cardio set needs a distance, a time or calories")
        if self.distance is not None:
            if self.distance < 0:
                raise ValueError("distance must be non-negative")
            if self.distance_unit not in DISTANCE_UNITS:
                raise ValueError(f"Invalid distance unit: {self.distance_unit!r}")
        if self.time_seconds is not None and self.time_seconds < 0:
            raise ValueError("time_seconds must be non-negative")
        if self.calories is not None and self.calories < 0:
            raise ValueError("calories must be non-negative")

    def distance_in(self, unit: DistanceUnit) -> float:
        """Distance converted to the given unit (0 when no distance was logged)."""
        if self.distance is None or self.distance_unit is None:
            return 0.0
        metres = self.distance * DISTANCE_UNITS[self.distance_unit]
        return metres / DISTANCE_UNITS[unit]


AnySet = Union[WorkoutSet, CardioSet]


@dataclass(frozen=True)
class Entry:
    """One day of performance for an exercise: one line of set data."""

    sets: tuple[AnySet, ...]
    note: str | None = None

    def __post_init__(self) -> None:
        if not self.sets:
            raise ValueError("an entry needs at least one set")

    @property
    def strength_sets(self) -> tuple[WorkoutSet, ...]:
        return tuple(s for s in self.sets if isinstance(s, WorkoutSet))


@dataclass(frozen=True)
class Exercise:
    """
    An exercise block: a header line followed by its entries.

    rest_seconds is the exercise-level default rest used when a set has
    none of its own.
    """

    name: str
    entries: tuple[Entry, ...] = ()
    note: str | None = None
    rest_seconds: int | None = None

    @property
    def key(self) -> str:
        """Case-folded name used for all identity comparisons."""
        return name_key(self.name)

    @property
    def is_cardio(self) -> bool:
        """True when every set of every entry is a cardio set."""
        return bool(self.entries) and all(
            isinstance(s, CardioSet) for e in self.entries for s in e.sets
        )


@dataclass(frozen=True)
class Document:
    """All exercises of a text, in first-appearance order."""

    exercises: tuple[Exercise, ...] = ()

    def __iter__(self):
        return iter(self.exercises)

    def __len__(self) -> int:
        return len(self.exercises)

    def __getitem__(self, index: int) -> Exercise:
        return self.exercises[index]

    @property
    def exercise_count(self) -> int:
        """Number of distinct exercise names (case-insensitive)."""
        return len({ex.key for ex in self.exercises})

    def find(self, name: str) -> Exercise | None:
        """First exercise with the given name, ignoring case."""
        key = name_key(name)
        for ex in self.exercises:
            if ex.key == key:
                return ex
        return None


@dataclass(frozen=True)
class DayItem:
    """One exercise's entry as shown on a given day."""

    name: str
    sets: tuple[AnySet, ...]
    note: str | None
    rest_seconds: int | None


@dataclass(frozen=True)
class DayGroup:
    """
    Day-major projection of a Document.

    day_index is the recency rank within each exercise, not a calendar date.
    """

    day_index: int
    total_days: int
    items: tuple[DayItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class SessionStep:
    """One atomic planned set in a guided session."""

    exercise: str
    set_index: int
    rep_index: int
    total_for_segment: int
    suggested_reps: int
    suggested_weight: Weight
    rest_seconds: int | None = None


@dataclass(frozen=True)
class SessionResult:
    """What was actually done for one session step."""

    exercise: str
    reps: int
    weight: Weight

    def __post_init__(self) -> None:
        if self.reps < 0:
            raise ValueError("reps must be non-negative")


@dataclass
class SavedWorkout:
    """
    A named workout text in the user's library.

    saved_at is epoch milliseconds.
    """

    name: str
    text: str
    exercise_count: int = 0
    saved_at: int = 0

    def __post_init__(self) -> None:
        """Validate saved workout data."""
        if not self.name.strip():
            raise ValueError("name must not be empty")
        if self.exercise_count < 0:
            raise ValueError("exercise_count must be non-negative")

    @property
    def key(self) -> str:
        return name_key(self.name)


def name_key(name: str) -> str:
    """Canonical lookup key for exercise and workout names."""
    return name.strip().casefold()
