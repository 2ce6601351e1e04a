"""
Unit tests for the workout text notation.

Covers the set-expression grammar, line classification, the document
fold and the day-major projection. Expected values are written out by
hand from the notation rules so the tests double as examples.
"""

import pytest

from liftscript.core.days import group_by_day
from liftscript.core.document import BuildState, fold_line, parse_workouts
from liftscript.core.grammar import (
    extract_rest,
    parse_cardio_set,
    parse_duration,
    parse_entry_line,
    parse_set_line,
    parse_single_set,
    tokenize,
)
from liftscript.core.lines import classify_line, is_header, split_comment
from liftscript.core.models import BODYWEIGHT, CardioSet, Numeric, WorkoutSet

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _ws(reps: int, weight: float | None, repeat: int = 1, rest: int | None = None) -> WorkoutSet:
    w = BODYWEIGHT if weight is None else Numeric(weight)
    return WorkoutSet(reps=reps, weight=w, repeat_count=repeat, rest_seconds=rest)


# ---------------------------------------------------------------------------
# Set expressions
# ---------------------------------------------------------------------------


class TestSetExpressions:
    """One segment -> one WorkoutSet, or None."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("5*135*3", _ws(5, 135, 3)),
            ("4x20x3", _ws(4, 20, 3)),
            ("4x20", _ws(4, 20)),
            ("5 * 62.5 * 3", _ws(5, 62.5, 3)),
            ("20BW", _ws(20, None)),
            ("20bw", _ws(20, None)),
            ("10xBW", _ws(10, None)),
            ("10 * bw", _ws(10, None)),
            ("10xBWx3", _ws(10, None, 3)),
            ("10*BW*3", _ws(10, None, 3)),
            ("5*0", _ws(5, 0)),
        ],
    )
    def test_valid_forms(self, text, expected):
        """Every documented form parses, x and * interchangeably."""
        assert parse_single_set(text) == expected

    @pytest.mark.parametrize(
        "text",
        ["", "Squat", "5", "5*", "*135", "5.5*100", "5*135*2.5", "5*135*3*2", "BW", "garbage", "5*135*0"],
    )
    def test_rejected_forms(self, text):
        """Anything outside the grammar is None, never an exception."""
        assert parse_single_set(text) is None

    def test_bodyweight_sentinel(self):
        """20BW is reps=20 at bodyweight, not at a load of 0."""
        s = parse_single_set("20BW")
        assert s.reps == 20
        assert s.weight is BODYWEIGHT
        assert s.weight != Numeric(0)
        assert s.repeat_count == 1

    def test_rest_suffix_on_set(self):
        """A trailing r<seconds> sets the per-set rest."""
        assert parse_single_set("8*135 r45") == _ws(8, 135, rest=45)

    def test_zero_rest_means_none(self):
        assert parse_single_set("8*135 r0") == _ws(8, 135)

    def test_tokenize_stops_on_foreign_character(self):
        assert tokenize("5*135") is not None
        assert tokenize("5/135") is None

    def test_extract_rest(self):
        assert extract_rest("Squat r90") == ("Squat", 90)
        assert extract_rest("Squat") == ("Squat", None)
        assert extract_rest("Squat r0") == ("Squat", None)
        # r must be its own word
        assert extract_rest("Squatr90") == ("Squatr90", None)

    @pytest.mark.parametrize("text", ["5x\u00b2", "\u00b2BW", "\u2460x5", "\u0665*100", "5*\uff11\uff10"])
    def test_only_ascii_digits_are_numbers(self, text):
        """Superscripts, circled and other script digits are not numbers."""
        assert tokenize(text) is None
        assert parse_single_set(text) is None

    def test_overlong_numbers_are_rejected(self):
        assert parse_single_set("9" * 5000 + "x5") is None
        assert parse_single_set("5*" + "1" * 5000) is None
        assert parse_single_set("5*1." + "5" * 5000) is None
        assert parse_single_set("5*135*" + "9" * 5000) is None

    def test_long_but_bounded_weight_parses(self):
        s = parse_single_set("5*" + "9" * 300)
        assert s is not None
        assert s.weight.value > 0

    def test_overlong_rest_is_not_a_suffix(self):
        text = "Squat r" + "9" * 5000
        assert extract_rest(text) == (text, None)


class TestSetLines:
    """Comma-separated lines are all-or-nothing."""

    def test_comma_list_all_valid(self):
        sets = parse_set_line("10x50, 9x50")
        assert sets == [_ws(10, 50), _ws(9, 50)]

    def test_comma_list_with_bad_segment_is_rejected(self):
        assert parse_set_line("10x50, garbage") is None

    def test_per_set_rests(self):
        sets = parse_set_line("8*135 r45, 8*155 r60, 6*155")
        assert [s.rest_seconds for s in sets] == [45, 60, None]
        assert [s.weight for s in sets] == [Numeric(135), Numeric(155), Numeric(155)]


# ---------------------------------------------------------------------------
# Cardio
# ---------------------------------------------------------------------------


class TestCardio:
    """Space-separated distance / time / calories expressions."""

    def test_duration(self):
        assert parse_duration("25:00") == 1500
        assert parse_duration("1:05:30") == 3930
        assert parse_duration("5:75") is None
        assert parse_duration("1:75:00") is None

    def test_distance_and_time(self):
        s = parse_cardio_set("3mi 25:00")
        assert s == CardioSet(distance=3.0, distance_unit="mi", time_seconds=1500)

    def test_time_and_calories(self):
        s = parse_cardio_set("12:00 c200")
        assert s.time_seconds == 720
        assert s.calories == 200
        assert s.distance is None

    def test_all_components(self):
        s = parse_cardio_set("10km 30:00 c350")
        assert (s.distance, s.distance_unit, s.time_seconds, s.calories) == (10.0, "km", 1800, 350)

    def test_time_only(self):
        assert parse_cardio_set("15:00") == CardioSet(time_seconds=900)

    def test_repeated_component_is_rejected(self):
        assert parse_cardio_set("3mi 2mi") is None

    def test_words_are_not_cardio(self):
        assert parse_cardio_set("Easy Run") is None

    @pytest.mark.parametrize("text", ["\u00b3mi", "\u0661:00", "c\u00b2", "9" * 5000 + "mi", "c" + "9" * 5000, "9" * 5000 + ":00"])
    def test_foreign_or_overlong_digits_are_not_cardio(self, text):
        assert parse_cardio_set(text) is None

    def test_strength_wins_over_cardio(self):
        """Entry lines try the strength grammar first."""
        assert parse_entry_line("5*135") == [_ws(5, 135)]
        assert parse_entry_line("400m 1:30") == [CardioSet(distance=400.0, distance_unit="m", time_seconds=90)]


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------


class TestLineClassifier:
    """Blank / comment / content and header detection."""

    def test_split_comment(self):
        assert split_comment("5*185*3 // Felt strong") == ("5*185*3", "Felt strong")
        assert split_comment("  Squat  ") == ("Squat", None)
        assert split_comment("Squat //") == ("Squat", None)

    def test_kinds(self):
        assert classify_line("").kind == "blank"
        assert classify_line("   ").kind == "blank"
        assert classify_line("//").kind == "blank"
        assert classify_line("// tempo work").kind == "comment"
        assert classify_line("5*135").kind == "content"

    def test_is_header(self):
        assert is_header("Squat r90")
        assert is_header("Bench Press // paused")
        assert not is_header("5*135*3")
        assert not is_header("3mi 25:00")
        assert not is_header("")
        assert not is_header("// note")


# ---------------------------------------------------------------------------
# Document builder
# ---------------------------------------------------------------------------


class TestDocumentBuilder:
    """The line fold from raw text to Document."""

    def test_basic_document(self):
        text = "Squat r90\n5*135*3\n5*185*3 // Felt strong\n\nBench Press\n8*135 r45, 8*155 r60, 6*155"
        doc = parse_workouts(text)

        assert [ex.name for ex in doc] == ["Squat", "Bench Press"]
        squat = doc[0]
        assert squat.rest_seconds == 90
        assert len(squat.entries) == 2
        assert squat.entries[1].note == "Felt strong"
        assert len(doc[1].entries[0].sets) == 3

    def test_blank_line_resets_current_exercise(self):
        """A repeated name after a blank line is a separate record."""
        doc = parse_workouts("Squat\n5*135\n\nSquat\n5*140\n")

        assert len(doc) == 2
        assert [ex.name for ex in doc] == ["Squat", "Squat"]
        assert all(len(ex.entries) == 1 for ex in doc)
        assert doc.exercise_count == 1

    def test_comma_list_with_garbage_becomes_header(self):
        doc = parse_workouts("Rows\n10x50, 9x50\n10x50, garbage")

        assert len(doc[0].entries) == 1
        assert len(doc[0].entries[0].sets) == 2
        assert doc[1].name == "10x50, garbage"
        assert doc[1].entries == ()

    def test_sets_before_any_header_go_to_unnamed(self):
        doc = parse_workouts("5*135\n5*140")
        assert doc[0].name == "Unnamed"
        assert len(doc[0].entries) == 2

    def test_comment_attaches_to_exercise_then_entry(self):
        doc = parse_workouts("Squat\n// brace hard\n5*135\n// felt good\n// knees ok")
        squat = doc[0]
        assert squat.note == "brace hard"
        assert squat.entries[0].note == "felt good knees ok"

    def test_comment_without_exercise_is_dropped(self):
        doc = parse_workouts("// warmup first\n\nSquat\n5*135")
        assert len(doc) == 1
        assert doc[0].note is None

    def test_comment_after_blank_line_is_dropped(self):
        doc = parse_workouts("Squat\n5*135\n\n// orphan")
        assert doc[0].entries[0].note is None

    def test_header_note(self):
        doc = parse_workouts("Deadlift r180 // mixed grip\n3*315")
        assert doc[0].name == "Deadlift"
        assert doc[0].rest_seconds == 180
        assert doc[0].note == "mixed grip"

    def test_cardio_exercise(self):
        doc = parse_workouts("Run\n3mi 25:00\n3.1mi 24:30")
        run = doc[0]
        assert run.is_cardio
        assert run.entries[1].sets[0].time_seconds == 1470

    def test_find_is_case_insensitive(self):
        doc = parse_workouts("Bench Press\n8*135")
        assert doc.find("bench press") is doc[0]
        assert doc.find("Squat") is None

    def test_fold_line_is_pure(self):
        """The same state and line always give an equal new state."""
        state = fold_line(BuildState(), "Squat")
        a = fold_line(state, "5*135")
        b = fold_line(state, "5*135")
        assert a == b
        assert state.current.entries == ()

    @pytest.mark.parametrize(
        "text",
        [
            "",
            "\n\n\n",
            "//",
            "x" * 500,
            "5*",
            "***",
            "r90",
            "1,2,3",
            "\t// \n5*5*5*5",
            "BW BW",
            "1:2:3:4",
            "Squat\n5x\u00b2",
            "\u00b2BW",
            "\u2460x5",
            "Squat r" + "9" * 5000,
            "9" * 5000 + "x5",
            "Run\n" + "9" * 5000 + ":00",
            "\ud800",
            "Squat\n5*135 \ud800",
        ],
    )
    def test_parsing_never_raises(self, text):
        """Any text yields a Document."""
        doc = parse_workouts(text)
        assert len(doc) >= 0


# ---------------------------------------------------------------------------
# Day grouping
# ---------------------------------------------------------------------------


class TestDayGrouping:
    """Line N of every exercise is day N."""

    def test_transpose(self):
        doc = parse_workouts("A\n1x1\n2x2\n\nB\n3x3\n\nC")
        days = group_by_day(doc)

        assert len(days) == 2
        assert [item.name for item in days[0].items] == ["A", "B"]
        assert [item.name for item in days[1].items] == ["A"]
        assert all(day.total_days == 2 for day in days)
        assert days[1].items[0].sets == (_ws(2, 2),)

    def test_empty_document(self):
        assert group_by_day(parse_workouts("")) == []

    def test_rest_and_note_carried(self):
        doc = parse_workouts("Squat r90\n5*135 // easy")
        item = group_by_day(doc)[0].items[0]
        assert item.rest_seconds == 90
        assert item.note == "easy"
