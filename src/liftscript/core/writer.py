"""
Write completed session results back into workout text.

For each exercise in the results, one new set line is inserted directly
below that exercise's existing entry block. Every other line is left
exactly as it was, so re-parsing the output shows the results as a new
entry of the same exercise.
"""

import logging
from dataclasses import dataclass, field

from .config import RESULT_LIST_SEPARATOR, RESULT_SEPARATOR
from .lines import classify_line, header_name, is_header
from .models import SessionResult, name_key
from .session import format_pair

logger = logging.getLogger(__name__)


@dataclass
class ResultGroup:
    """All results of one exercise, in the order they were recorded."""

    name: str
    results: list[SessionResult] = field(default_factory=list)


def group_results(results: list[SessionResult]) -> list[ResultGroup]:
    """Group results by exercise name (case-insensitive), first occurrence first."""
    groups: dict[str, ResultGroup] = {}
    for r in results:
        key = name_key(r.exercise)
        if key not in groups:
            groups[key] = ResultGroup(name=r.exercise)
        groups[key].results.append(r)
    return list(groups.values())


def format_result_line(results: list[SessionResult]) -> str:
    """
    Render one exercise's results as a single set line.

    one result             -> "5*135"
    identical results (n)  -> "5*135*n"
    anything else          -> "5*135, 4*135"
    """
    first = results[0]
    if len(results) == 1:
        return format_pair(first.reps, first.weight)
    if all(r.reps == first.reps and r.weight == first.weight for r in results):
        return f"{format_pair(first.reps, first.weight)}{RESULT_SEPARATOR}{len(results)}"
    return RESULT_LIST_SEPARATOR.join(format_pair(r.reps, r.weight) for r in results)


def find_header(lines: list[str], name: str) -> int | None:
    """Index of the first header line naming the exercise, or None."""
    key = name_key(name)
    for i, line in enumerate(lines):
        if not is_header(line):
            continue
        exercise_name, _rest = header_name(classify_line(line).content)
        if name_key(exercise_name) == key:
            return i
    return None


def find_insertion_point(lines: list[str], header_idx: int) -> int:
    """
    Index just past the exercise's block.

    The block runs from the header to the next blank line or the next
    header, whichever comes first.
    """
    idx = header_idx + 1
    while idx < len(lines):
        if classify_line(lines[idx]).kind == "blank" or is_header(lines[idx]):
            break
        idx += 1
    return idx


def build_results_text(results: list[SessionResult], text: str) -> str:
    """
    Insert session results into the workout text.

    Exercises whose header cannot be found are skipped.

    Args:
        results: Results in the order they were recorded
        text: The text the session was built from

    Returns:
        New workout text
    """
    lines = text.split("\n")
    for group in group_results(results):
        header_idx = find_header(lines, group.name)
        if header_idx is None:
            logger.debug("No header for %r; dropping %d result(s)", group.name, len(group.results))
            continue
        insert_at = find_insertion_point(lines, header_idx)
        lines.insert(insert_at, format_result_line(group.results))
    return "\n".join(lines)
