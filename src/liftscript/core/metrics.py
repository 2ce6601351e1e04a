"""
Pure metric computation functions.

Strength metrics reduce a list of sets to one number; the cardio family
mirrors them with unit-bearing sums. Bodyweight counts as zero load for
volume and max weight, but its reps count in total reps.

Series and trends apply a metric to each entry of an exercise in order,
which is what the trend charts plot.
"""

from dataclasses import dataclass
from typing import Iterable, Literal, Sequence

from .models import (
    AnySet,
    CardioSet,
    DistanceUnit,
    Exercise,
    Numeric,
    Weight,
    WorkoutSet,
)

MetricKey = Literal["volume", "max_weight", "total_reps"]
CardioMetricKey = Literal["distance", "time", "calories", "pace"]


@dataclass(frozen=True)
class MetricDef:
    """Display descriptor for a metric."""

    key: str
    label: str
    unit: str = ""


METRICS: tuple[MetricDef, ...] = (
    MetricDef("volume", "Volume"),
    MetricDef("max_weight", "Max Weight", "weight"),
    MetricDef("total_reps", "Total Reps"),
)

CARDIO_METRICS: tuple[MetricDef, ...] = (
    MetricDef("distance", "Distance", "distance"),
    MetricDef("time", "Time"),
    MetricDef("calories", "Calories", "cal"),
    MetricDef("pace", "Pace"),
)


def load_of(weight: Weight) -> float:
    """External load of a weight; bodyweight is 0."""
    if isinstance(weight, Numeric):
        return weight.value
    return 0.0


def _strength(sets: Iterable[AnySet]) -> list[WorkoutSet]:
    return [s for s in sets if isinstance(s, WorkoutSet)]


def _cardio(sets: Iterable[AnySet]) -> list[CardioSet]:
    return [s for s in sets if isinstance(s, CardioSet)]


# =============================================================================
# Strength
# =============================================================================


def volume(sets: Sequence[AnySet]) -> float:
    """
    Total load moved.

    volume = sum(reps * load * repeat_count)
    """
    return sum(s.reps * load_of(s.weight) * s.repeat_count for s in _strength(sets))


def max_weight(sets: Sequence[AnySet]) -> float:
    """Heaviest load across sets (0 when all bodyweight or empty)."""
    return max((load_of(s.weight) for s in _strength(sets)), default=0.0)


def total_reps(sets: Sequence[AnySet]) -> int:
    """total_reps = sum(reps * repeat_count)"""
    return sum(s.reps * s.repeat_count for s in _strength(sets))


def total_sets(sets: Sequence[AnySet]) -> int:
    """Number of performed sets (repeat counts expanded)."""
    return sum(s.repeat_count for s in _strength(sets))


def compute_metric(sets: Sequence[AnySet], metric: MetricKey) -> float:
    """
    Compute a strength metric by key.

    Raises:
        ValueError: If metric is not a strength metric key
    """
    if metric == "volume":
        return volume(sets)
    if metric == "max_weight":
        return max_weight(sets)
    if metric == "total_reps":
        return total_reps(sets)
    raise ValueError(f"Unknown metric '{metric}'. Valid keys: {', '.join(m.key for m in METRICS)}")


# =============================================================================
# Cardio
# =============================================================================


def total_distance(sets: Sequence[AnySet], unit: DistanceUnit = "mi") -> float:
    """Sum of distances converted to unit."""
    return sum(s.distance_in(unit) for s in _cardio(sets))


def total_time(sets: Sequence[AnySet]) -> int:
    """Sum of durations in seconds."""
    return sum(s.time_seconds or 0 for s in _cardio(sets))


def total_calories(sets: Sequence[AnySet]) -> int:
    return sum(s.calories or 0 for s in _cardio(sets))


def pace(sets: Sequence[AnySet], unit: DistanceUnit = "mi") -> float:
    """Seconds per distance unit; 0 when no distance or time was logged."""
    distance = total_distance(sets, unit)
    seconds = total_time(sets)
    if distance <= 0 or seconds <= 0:
        return 0.0
    return seconds / distance


def compute_cardio_metric(
    sets: Sequence[AnySet],
    metric: CardioMetricKey,
    unit: DistanceUnit = "mi",
) -> float:
    """
    Compute a cardio metric by key.

    Raises:
        ValueError: If metric is not a cardio metric key
    """
    if metric == "distance":
        return total_distance(sets, unit)
    if metric == "time":
        return total_time(sets)
    if metric == "calories":
        return total_calories(sets)
    if metric == "pace":
        return pace(sets, unit)
    raise ValueError(
        f"Unknown cardio metric '{metric}'. Valid keys: {', '.join(m.key for m in CARDIO_METRICS)}"
    )


# =============================================================================
# Per-exercise series
# =============================================================================


@dataclass(frozen=True)
class MetricTrend:
    """Latest value of a metric and its change from the previous entry."""

    metric: MetricDef
    latest: float | None
    previous: float | None

    @property
    def diff(self) -> float | None:
        if self.latest is None or self.previous is None:
            return None
        return self.latest - self.previous


def resolve_metric(exercise: Exercise, metric: str) -> MetricDef:
    """
    Pick the metric to show for an exercise.

    Cardio exercises fall back to distance when asked for a strength
    metric, and strength exercises to volume when asked for a cardio one.
    """
    if exercise.is_cardio:
        for m in CARDIO_METRICS:
            if m.key == metric:
                return m
        return CARDIO_METRICS[0]
    for m in METRICS:
        if m.key == metric:
            return m
    return METRICS[0]


def metric_series(exercise: Exercise, metric: str, unit: DistanceUnit = "mi") -> list[float]:
    """One metric value per entry, oldest line first."""
    chosen = resolve_metric(exercise, metric)
    if exercise.is_cardio:
        return [compute_cardio_metric(e.sets, chosen.key, unit) for e in exercise.entries]  # type: ignore[arg-type]
    return [compute_metric(e.sets, chosen.key) for e in exercise.entries]  # type: ignore[arg-type]


def metric_trend(exercise: Exercise, metric: str, unit: DistanceUnit = "mi") -> MetricTrend:
    """Latest and previous values of a metric for an exercise."""
    series = metric_series(exercise, metric, unit)
    return MetricTrend(
        metric=resolve_metric(exercise, metric),
        latest=series[-1] if series else None,
        previous=series[-2] if len(series) > 1 else None,
    )


def is_bodyweight_only(exercise: Exercise) -> bool:
    """True when every strength set of every entry is bodyweight."""
    sets = [s for e in exercise.entries for s in e.strength_sets]
    return bool(sets) and all(not isinstance(s.weight, Numeric) for s in sets)
