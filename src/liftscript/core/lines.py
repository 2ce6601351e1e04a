"""
Line classification.

Splits a raw line into content and trailing note and decides what kind
of line it is. The document builder and the result writer both go
through here so that they agree on where blocks start and end.
"""

from dataclasses import dataclass
from typing import Literal

from .config import COMMENT_TOKEN
from .grammar import extract_rest, parse_entry_line

LineKind = Literal["blank", "comment", "content"]


@dataclass(frozen=True)
class ClassifiedLine:
    """A raw line split into its parts."""

    kind: LineKind
    content: str
    note: str | None


def split_comment(line: str) -> tuple[str, str | None]:
    """
    Split a line at the first "//".

    "5*185*3 // Felt strong" -> ("5*185*3", "Felt strong")
    "Squat //"               -> ("Squat", None)

    Returns:
        (trimmed content, trimmed note or None)
    """
    raw = line.strip()
    idx = raw.find(COMMENT_TOKEN)
    if idx == -1:
        return raw, None
    content = raw[:idx].strip()
    note = raw[idx + len(COMMENT_TOKEN):].strip()
    return content, note or None


def classify_line(line: str) -> ClassifiedLine:
    """
    Classify one raw line.

    blank   - no content and no note; separates exercises
    comment - only a note
    content - anything else (set data or an exercise header)
    """
    content, note = split_comment(line)
    if content:
        return ClassifiedLine("content", content, note)
    if note:
        return ClassifiedLine("comment", "", note)
    return ClassifiedLine("blank", "", None)


def header_name(content: str) -> tuple[str, int | None]:
    """Exercise name and default rest of a header line's content."""
    return extract_rest(content)


def is_header(line: str) -> bool:
    """True when the line would start a new exercise."""
    classified = classify_line(line)
    return classified.kind == "content" and parse_entry_line(classified.content) is None
