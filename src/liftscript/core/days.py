"""
Day-major projection of a Document.

Entry i of every exercise is treated as "day i". Exercises with fewer
entries simply drop out of the later days.
"""

from .models import DayGroup, DayItem, Document


def group_by_day(document: Document) -> list[DayGroup]:
    """
    Transpose exercise-major data into day-major groups.

    Args:
        document: Parsed workout text

    Returns:
        One DayGroup per day index that has at least one item
    """
    total_days = max((len(ex.entries) for ex in document), default=0)
    days: list[DayGroup] = []
    for d in range(total_days):
        items = tuple(
            DayItem(
                name=ex.name,
                sets=ex.entries[d].sets,
                note=ex.entries[d].note,
                rest_seconds=ex.rest_seconds,
            )
            for ex in document
            if d < len(ex.entries)
        )
        if items:
            days.append(DayGroup(day_index=d, total_days=total_days, items=items))
    return days
