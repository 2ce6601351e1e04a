"""
Minimal smoke tests for the liftscript CLI.

Tests basic functionality:
- App runs without errors
- First run shows the sample workout
- Text can be edited, logged into and run as a session
- Saved workouts can be listed, loaded and deleted
- Workouts can be shared and imported by code
"""

import re
from pathlib import Path

import pytest
from typer.testing import CliRunner

from liftscript.cli.main import app

runner = CliRunner()

LEGS = "Squat r90\n5*135*3\n\nLunge\n10*BW\n"


@pytest.fixture
def data_dir(tmp_path):
    """Data directory with notifications off."""
    d = tmp_path / "data"
    d.mkdir()
    (d / "config.yaml").write_text("session:\n  notifications: false\n", encoding="utf-8")
    return d


@pytest.fixture
def no_sleep(monkeypatch):
    """Make the rest countdown instant."""
    monkeypatch.setattr("liftscript.cli.commands.session._sleep", lambda _seconds: None)


def _invoke(data_dir: Path, *args: str, input: str | None = None):
    return runner.invoke(app, [*args, "--data-dir", str(data_dir)], input=input)


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "workout.txt"
    path.write_text(text, encoding="utf-8")
    return path


class TestCLISmoke:
    """Basic smoke tests for viewing and editing."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "workout" in result.output.lower()

    def test_first_show_uses_sample(self, data_dir):
        result = _invoke(data_dir, "show", "--no-chart")
        assert result.exit_code == 0
        assert "Squat" in result.output
        assert "Bench Press" in result.output
        assert (data_dir / "current.txt").exists()

    def test_show_with_chart(self, data_dir):
        result = _invoke(data_dir, "show", "--metric", "max_weight")
        assert result.exit_code == 0
        assert "Max Weight" in result.output

    def test_show_unknown_metric(self, data_dir):
        result = _invoke(data_dir, "show", "--metric", "power")
        assert result.exit_code == 1
        assert "Unknown metric" in result.output

    def test_days(self, data_dir):
        result = _invoke(data_dir, "days")
        assert result.exit_code == 0
        assert "Day 1 of 2" in result.output

    def test_steps(self, data_dir):
        result = _invoke(data_dir, "steps")
        assert result.exit_code == 0
        assert "Session Steps" in result.output
        assert "Pull-ups" in result.output

    def test_edit_from_file(self, data_dir, tmp_path):
        source = _write(tmp_path, LEGS)
        result = _invoke(data_dir, "edit", "--from", str(source))
        assert result.exit_code == 0
        assert "2 exercises" in result.output
        assert (data_dir / "current.txt").read_text(encoding="utf-8") == LEGS

    def test_edit_from_stdin(self, data_dir):
        result = _invoke(data_dir, "edit", input="Squat\n5*135\n")
        assert result.exit_code == 0
        assert (data_dir / "current.txt").read_text(encoding="utf-8") == "Squat\n5*135\n"

    def test_new_clears_text(self, data_dir):
        _invoke(data_dir, "show")
        result = _invoke(data_dir, "new")
        assert result.exit_code == 0
        assert (data_dir / "current.txt").read_text(encoding="utf-8") == ""


class TestLogCommand:
    """Adding results from the command line."""

    def test_log_inserts_under_exercise(self, data_dir, tmp_path):
        path = _write(tmp_path, "Squat\n5*135\n\nBench\n8*135\n")
        result = _invoke(data_dir, "log", "Squat=5*140*2", "--file", str(path))
        assert result.exit_code == 0
        assert path.read_text(encoding="utf-8") == "Squat\n5*135\n5*140*2\n\nBench\n8*135\n"

    def test_log_unknown_exercise_warns(self, data_dir, tmp_path):
        path = _write(tmp_path, "Squat\n5*135")
        result = _invoke(data_dir, "log", "Deadlift=3*315", "--file", str(path))
        assert result.exit_code == 0
        assert "Deadlift" in result.output
        assert path.read_text(encoding="utf-8") == "Squat\n5*135"

    def test_log_invalid_result(self, data_dir, tmp_path):
        path = _write(tmp_path, "Squat\n5*135")
        result = _invoke(data_dir, "log", "Squat=heavy", "--file", str(path))
        assert result.exit_code == 1


class TestRunCommand:
    """Guided session driven through stdin."""

    def test_run_writes_results(self, data_dir, tmp_path, no_sleep):
        path = _write(tmp_path, "Curls r2\n12*25*2")
        # Accept the suggestion, rest, then log one rep fewer
        result = _invoke(data_dir, "run", "--file", str(path), input="\n11*25\n")
        assert result.exit_code == 0, result.output
        assert "Workout complete" in result.output
        assert path.read_text(encoding="utf-8") == "Curls r2\n12*25*2\n12*25, 11*25"

    def test_run_discard(self, data_dir, tmp_path, no_sleep):
        path = _write(tmp_path, "Curls r2\n12*25*2")
        result = _invoke(data_dir, "run", "--file", str(path), input="q\nd\n")
        assert result.exit_code == 0, result.output
        assert "Nothing saved" in result.output
        assert path.read_text(encoding="utf-8") == "Curls r2\n12*25*2"

    def test_run_end_and_save_partial(self, data_dir, tmp_path, no_sleep):
        path = _write(tmp_path, "Curls\n12*25*2\n\nRows\n10*95")
        result = _invoke(data_dir, "run", "--file", str(path), input="12*30\nq\ns\n")
        assert result.exit_code == 0, result.output
        assert path.read_text(encoding="utf-8") == "Curls\n12*25*2\n12*30\n\nRows\n10*95"

    def test_run_empty(self, data_dir, tmp_path):
        path = _write(tmp_path, "Squat\n\nBench")
        result = _invoke(data_dir, "run", "--file", str(path))
        assert result.exit_code == 0
        assert "No exercises" in result.output


class TestLibraryCommands:
    """save / list / load / delete / share / import."""

    def test_save_list_load_delete(self, data_dir, tmp_path):
        _invoke(data_dir, "edit", "--from", str(_write(tmp_path, LEGS)))

        result = _invoke(data_dir, "save", "Leg Day")
        assert result.exit_code == 0
        assert "Saved 'Leg Day'" in result.output

        result = _invoke(data_dir, "list")
        assert result.exit_code == 0
        assert "Leg Day" in result.output

        _invoke(data_dir, "new")
        result = _invoke(data_dir, "load", "leg day")
        assert result.exit_code == 0
        assert (data_dir / "current.txt").read_text(encoding="utf-8") == LEGS

        result = _invoke(data_dir, "save")
        assert "Updated 'Leg Day'" in result.output

        result = _invoke(data_dir, "delete", "1", "--yes")
        assert result.exit_code == 0
        assert "Deleted 'Leg Day'" in result.output
        assert "No saved workouts" in _invoke(data_dir, "list").output

    def test_load_missing(self, data_dir):
        result = _invoke(data_dir, "load", "Nope")
        assert result.exit_code == 1

    def test_delete_out_of_range(self, data_dir):
        result = _invoke(data_dir, "delete", "3", "--yes")
        assert result.exit_code == 1

    def test_delete_declined(self, data_dir, tmp_path):
        _invoke(data_dir, "edit", "--from", str(_write(tmp_path, LEGS)))
        _invoke(data_dir, "save", "Leg Day")
        result = _invoke(data_dir, "delete", "1", input="n\n")
        assert result.exit_code == 0
        assert "Leg Day" in _invoke(data_dir, "list").output

    def test_share_and_import(self, data_dir, tmp_path):
        _invoke(data_dir, "edit", "--from", str(_write(tmp_path, LEGS)))
        result = _invoke(data_dir, "share", "--name", "Legs")
        assert result.exit_code == 0
        code = re.search(r"Share code: ([A-Z2-9]{6})", result.output).group(1)

        _invoke(data_dir, "new")
        result = _invoke(data_dir, "import", code.lower())
        assert result.exit_code == 0
        assert "Imported 'Legs'" in result.output
        assert (data_dir / "current.txt").read_text(encoding="utf-8") == LEGS

    def test_import_unknown_code(self, data_dir):
        result = _invoke(data_dir, "import", "ZZZZZZ")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_share_empty(self, data_dir):
        _invoke(data_dir, "new")
        result = _invoke(data_dir, "share")
        assert result.exit_code == 1
