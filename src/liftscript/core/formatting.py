"""
Human-readable rendering of sets, rests, timers and dates.
"""

from datetime import date, timedelta

from .metrics import total_reps, total_sets
from .models import AnySet, CardioSet, Numeric, Weight, WorkoutSet, format_number


def format_rest(seconds: int | None) -> str | None:
    """90 -> "1m 30s rest", 45 -> "45s rest", None -> None."""
    if not seconds:
        return None
    if seconds >= 60:
        m, s = divmod(seconds, 60)
        return f"{m}m {s}s rest" if s > 0 else f"{m}m rest"
    return f"{seconds}s rest"


def format_weight(weight: Weight, unit: str = "lbs") -> str:
    if isinstance(weight, Numeric):
        return f"{weight} {unit}"
    return "bodyweight"


def format_cardio_time(seconds: int) -> str:
    """1470 -> "24:30", 3930 -> "1:05:30"."""
    h, rem = divmod(int(seconds), 3600)
    m, s = divmod(rem, 60)
    if h:
        return f"{h}:{m:02d}:{s:02d}"
    return f"{m}:{s:02d}"


def format_cardio(s: CardioSet) -> str:
    parts = []
    if s.distance is not None:
        parts.append(f"{format_number(s.distance)} {s.distance_unit}")
    if s.time_seconds is not None:
        parts.append(format_cardio_time(s.time_seconds))
    if s.calories is not None:
        parts.append(f"{s.calories} cal")
    return " · ".join(parts)


def format_set(s: AnySet, unit: str = "lbs") -> str:
    """"3 sets × 5 reps @ 135 lbs", "10 reps @ bodyweight"."""
    if isinstance(s, CardioSet):
        return format_cardio(s)
    w = format_weight(s.weight, unit)
    if s.repeat_count > 1:
        return f"{s.repeat_count} sets × {s.reps} reps @ {w}"
    return f"{s.reps} reps @ {w}"


def format_entry_summary(sets: tuple[AnySet, ...], unit: str = "lbs") -> str:
    """"3 sets · 24 total reps @ 135 lbs, 155 lbs"."""
    strength = [s for s in sets if isinstance(s, WorkoutSet)]
    if not strength:
        return " | ".join(format_set(s, unit) for s in sets)
    weights: list[str] = []
    for s in strength:
        label = format_weight(s.weight, unit)
        if label not in weights:
            weights.append(label)
    return f"{total_sets(strength)} sets · {total_reps(strength)} total reps @ {', '.join(weights)}"


def format_timer(seconds: int) -> str:
    """Countdown display: 75 -> "1:15", 9 -> "9"."""
    m, s = divmod(max(0, int(seconds)), 60)
    if m > 0:
        return f"{m}:{s:02d}"
    return str(s)


def get_auto_date(index: int, total: int, today: date | None = None) -> date:
    """
    Calendar date for entry `index` of `total`.

    The last entry is today; each earlier one is a day before.
    """
    today = today or date.today()
    return today - timedelta(days=total - 1 - index)


def format_date(d: date) -> str:
    """date(2026, 10, 18) -> "Sun, Oct 18"."""
    return f"{d.strftime('%a')}, {d.strftime('%b')} {d.day}"
