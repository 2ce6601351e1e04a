"""
Set-expression grammar.

Parses one textual segment describing a batch of identical sets:

    <reps>X BW X<sets>     10xBWx3, 10*BW*3
    <reps>BW               20BW
    <reps>X BW             10xBW, 10*BW
    <reps>X<weight>X<sets> 4x20x3, 5*62.5*3
    <reps>X<weight>        4x20, 4*20

X and * are interchangeable, matching is case-insensitive and whitespace
between tokens is ignored. Any segment may end with a rest suffix
(" r90"). The segment is first split into tokens, then each rule is tried
in order against the whole token sequence; the first full match wins.

Cardio lines ("3mi 25:00", "12:00 c200") use a second, space-separated
grammar implemented at the bottom of this module.

Every function here is total: on anything unrecognised it returns None,
never raises.
"""

import re
from dataclasses import dataclass
from typing import Callable, Literal, Sequence

from .config import (
    BODYWEIGHT_TOKEN,
    CALORIES_PREFIX,
    DISTANCE_UNITS,
    MAX_NUMBER_DIGITS,
    MULTIPLY_TOKENS,
    REST_SUFFIX_PATTERN,
    SET_SEPARATOR,
)
from .models import BODYWEIGHT, AnySet, CardioSet, Numeric, WorkoutSet

_REST_RE = re.compile(REST_SUFFIX_PATTERN, re.IGNORECASE)

_DIGITS = frozenset("0123456789")
_NUM = rf"[0-9]{{1,{MAX_NUMBER_DIGITS}}}"

TokenKind = Literal["NUM", "TIMES", "BW"]


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str

    @property
    def is_int(self) -> bool:
        return self.kind == "NUM" and "." not in self.text


def extract_rest(text: str) -> tuple[str, int | None]:
    """
    Strip a trailing rest suffix.

    "Squat r90" -> ("Squat", 90); "5*135" -> ("5*135", None).
    A suffix of r0 is removed but yields no rest.

    Args:
        text: Header or set text

    Returns:
        (text without suffix, rest seconds or None)
    """
    m = _REST_RE.search(text)
    if m is None:
        return text, None
    seconds = int(m.group(1))
    return text[: m.start()].strip(), seconds if seconds > 0 else None


def _scan_digits(text: str, start: int) -> int | None:
    end = start
    while end < len(text) and text[end] in _DIGITS:
        end += 1
    return end if end - start <= MAX_NUMBER_DIGITS else None


def tokenize(segment: str) -> list[Token] | None:
    """
    Split a set expression into NUM / TIMES / BW tokens.

    Returns None as soon as a character outside the grammar is met, and
    for digit runs longer than MAX_NUMBER_DIGITS. Only ASCII digits count.
    """
    text = segment.upper()
    tokens: list[Token] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch.isspace():
            i += 1
        elif ch in _DIGITS:
            j = _scan_digits(text, i)
            if j is None:
                return None
            # Fractional part needs digits on both sides of the dot
            if j + 1 < n and text[j] == "." and text[j + 1] in _DIGITS:
                j = _scan_digits(text, j + 1)
                if j is None:
                    return None
            tokens.append(Token("NUM", text[i:j]))
            i = j
        elif ch in MULTIPLY_TOKENS:
            tokens.append(Token("TIMES", ch))
            i += 1
        elif text.startswith(BODYWEIGHT_TOKEN, i):
            tokens.append(Token("BW", BODYWEIGHT_TOKEN))
            i += len(BODYWEIGHT_TOKEN)
        else:
            return None
    return tokens


# -----------------------------------------------------------------------------
# Rules. Each takes the full token list and returns (reps, weight, sets)
# or None. "I" = integer NUM, "N" = any NUM.
# -----------------------------------------------------------------------------

_Shape = tuple[str, ...]
_Match = tuple[int, object, int]


def _fits(tokens: Sequence[Token], shape: _Shape) -> bool:
    if len(tokens) != len(shape):
        return False
    for tok, want in zip(tokens, shape):
        if want == "I":
            if not tok.is_int:
                return False
        elif want == "N":
            if tok.kind != "NUM":
                return False
        elif tok.kind != want:
            return False
    return True


def rule_bodyweight_sets(tokens: Sequence[Token]) -> _Match | None:
    """<reps>X BW X<sets>"""
    if not _fits(tokens, ("I", "TIMES", "BW", "TIMES", "I")):
        return None
    return int(tokens[0].text), BODYWEIGHT, int(tokens[4].text)


def rule_bodyweight(tokens: Sequence[Token]) -> _Match | None:
    """<reps>BW"""
    if not _fits(tokens, ("I", "BW")):
        return None
    return int(tokens[0].text), BODYWEIGHT, 1


def rule_bodyweight_times(tokens: Sequence[Token]) -> _Match | None:
    """<reps>X BW"""
    if not _fits(tokens, ("I", "TIMES", "BW")):
        return None
    return int(tokens[0].text), BODYWEIGHT, 1


def rule_weighted_sets(tokens: Sequence[Token]) -> _Match | None:
    """<reps>X<weight>X<sets>"""
    if not _fits(tokens, ("I", "TIMES", "N", "TIMES", "I")):
        return None
    return int(tokens[0].text), Numeric(float(tokens[2].text)), int(tokens[4].text)


def rule_weighted(tokens: Sequence[Token]) -> _Match | None:
    """<reps>X<weight>"""
    if not _fits(tokens, ("I", "TIMES", "N")):
        return None
    return int(tokens[0].text), Numeric(float(tokens[2].text)), 1


# Three-token BW form must precede the two-token ones
SET_RULES: tuple[tuple[str, Callable[[Sequence[Token]], _Match | None]], ...] = (
    ("bodyweight_sets", rule_bodyweight_sets),
    ("bodyweight", rule_bodyweight),
    ("bodyweight_times", rule_bodyweight_times),
    ("weighted_sets", rule_weighted_sets),
    ("weighted", rule_weighted),
)


def parse_single_set(segment: str) -> WorkoutSet | None:
    """
    Parse one set expression.

    Args:
        segment: e.g. "5*135*3 r90", "20BW", "10 x BW"

    Returns:
        WorkoutSet, or None when the segment is not a set expression
    """
    cleaned, rest = extract_rest(segment.strip())
    tokens = tokenize(cleaned)
    if not tokens:
        return None

    for _name, rule in SET_RULES:
        match = rule(tokens)
        if match is None:
            continue
        reps, weight, repeat = match
        if repeat < 1:
            return None
        return WorkoutSet(reps=reps, weight=weight, repeat_count=repeat, rest_seconds=rest)  # type: ignore[arg-type]
    return None


# -----------------------------------------------------------------------------
# Cardio
# -----------------------------------------------------------------------------

_DISTANCE_RE = re.compile(rf"^({_NUM}(?:\.{_NUM})?)\s*(MI|KM|M)$")
_TIME_RE = re.compile(rf"^(?:({_NUM}):)?({_NUM}):([0-5][0-9])$")
_CALORIES_RE = re.compile(rf"^{CALORIES_PREFIX}({_NUM})$")


def parse_duration(text: str) -> int | None:
    """Parse "m:ss" or "h:mm:ss" into seconds."""
    m = _TIME_RE.match(text.strip())
    if m is None:
        return None
    hours = int(m.group(1)) if m.group(1) else 0
    minutes = int(m.group(2))
    if m.group(1) and minutes >= 60:
        return None
    return hours * 3600 + minutes * 60 + int(m.group(3))


def parse_cardio_set(segment: str) -> CardioSet | None:
    """
    Parse a cardio expression.

    Components (each at most once, any order, whitespace separated):
        distance  3mi, 10km, 400m
        time      25:00, 1:05:30
        calories  c200

    Args:
        segment: e.g. "3.2mi 24:30", "12:00 c200"

    Returns:
        CardioSet, or None when the segment is not a cardio expression
    """
    cleaned, rest = extract_rest(segment.strip())
    parts = cleaned.upper().split()
    if not parts:
        return None

    distance: float | None = None
    unit: str | None = None
    seconds: int | None = None
    calories: int | None = None

    for part in parts:
        m = _DISTANCE_RE.match(part)
        if m and distance is None:
            distance = float(m.group(1))
            unit = m.group(2).lower()
            continue
        duration = parse_duration(part)
        if duration is not None and seconds is None:
            seconds = duration
            continue
        m = _CALORIES_RE.match(part)
        if m and calories is None:
            calories = int(m.group(1))
            continue
        return None

    if unit is not None and unit not in DISTANCE_UNITS:
        return None
    return CardioSet(
        distance=distance,
        distance_unit=unit,  # type: ignore[arg-type]
        time_seconds=seconds,
        calories=calories,
        rest_seconds=rest,
    )


# -----------------------------------------------------------------------------
# Whole lines
# -----------------------------------------------------------------------------


def _parse_segments(content: str, parse: Callable[[str], AnySet | None]) -> list[AnySet] | None:
    if SET_SEPARATOR not in content:
        single = parse(content)
        return [single] if single is not None else None

    parsed = [parse(seg) for seg in content.split(SET_SEPARATOR)]
    if any(p is None for p in parsed):
        return None
    return parsed  # type: ignore[return-value]


def parse_set_line(content: str) -> list[WorkoutSet] | None:
    """
    Parse the content of a line as strength set data.

    A comma-separated line is accepted only when every segment parses;
    one bad segment rejects the whole line.

    Returns:
        List of sets, or None when the line is not a set line
    """
    return _parse_segments(content, parse_single_set)  # type: ignore[return-value]


def parse_entry_line(content: str) -> list[AnySet] | None:
    """
    Parse the content of a line as entry data, strength first, then cardio.

    Returns:
        List of sets, or None when the line should be read as a header
    """
    strength = parse_set_line(content)
    if strength is not None:
        return list(strength)
    return _parse_segments(content, parse_cardio_set)
