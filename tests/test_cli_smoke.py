"""
Smoke tests for the fittrack CLI.

Tests basic functionality:
- App runs without errors
- A program can be imported and its weeks shown
- Workouts can be logged, listed and deleted
- Stats, export and reset work
"""

import json
import tempfile
from pathlib import Path

import pytest
from typer.testing import CliRunner

from fittrack.cli.commands.sessions import parse_set_entry
from fittrack.cli.main import app
from fittrack.io.serializers import ValidationError


runner = CliRunner()


@pytest.fixture
def data_dir():
    """Create a temporary data directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def imported(data_dir, program_json):
    """Data directory with the sample program imported."""
    source = data_dir / "program.json"
    source.write_text(program_json, encoding="utf-8")
    result = runner.invoke(app, ["import-program", str(source), "--data-dir", str(data_dir)])
    assert result.exit_code == 0, result.output
    return data_dir


def _json(args: list[str]):
    result = runner.invoke(app, args)
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


class TestCLISmoke:
    """Basic smoke tests for CLI commands."""

    def test_app_help(self):
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        assert "import-program" in result.output

    def test_import_creates_store(self, imported):
        assert (imported / "programs.jsonl").exists()
        assert (imported / "logs.jsonl").exists()

    def test_import_from_stdin(self, data_dir, program_json):
        result = runner.invoke(app, ["import-program", "-", "--data-dir", str(data_dir)], input=program_json)

        assert result.exit_code == 0
        assert "program #1" in result.output

    def test_import_invalid_json(self, data_dir):
        source = data_dir / "bad.json"
        source.write_text("{oops", encoding="utf-8")

        result = runner.invoke(app, ["import-program", str(source), "--data-dir", str(data_dir)])

        assert result.exit_code == 1
        assert "Invalid program format" in result.output

    def test_import_missing_file(self, data_dir):
        result = runner.invoke(app, ["import-program", str(data_dir / "nope.json"), "--data-dir", str(data_dir)])

        assert result.exit_code == 1

    def test_commands_without_program(self, data_dir):
        result = runner.invoke(app, ["week", "--data-dir", str(data_dir)])

        assert result.exit_code == 1
        assert "No program imported yet" in result.output

    def test_week_json(self, imported):
        out = _json(["week", "--week", "2", "--json", "--data-dir", str(imported)])

        assert out["week"] == 2
        assert out["days"]["monday"][0] == {"name": "plank", "sets": 3, "hold_seconds": 40}
        assert out["days"]["monday"][1]["reps"] == 10

    def test_week_single_day(self, imported):
        out = _json(["week", "-w", "4", "-d", "Thursday", "--json", "--data-dir", str(imported)])

        assert list(out["days"]) == ["thursday"]
        assert out["days"]["thursday"][0]["reps_each_side"] == 12

    def test_week_unknown_day(self, imported):
        result = runner.invoke(app, ["week", "--day", "sunday", "--data-dir", str(imported)])

        assert result.exit_code == 1

    def test_week_table(self, imported):
        result = runner.invoke(app, ["week", "--data-dir", str(imported)])

        assert result.exit_code == 0
        assert "plank" in result.output

    def test_default_command_shows_week(self, imported):
        result = runner.invoke(app, [], env={"FITTRACK_HOME": str(imported)})

        assert result.exit_code == 0
        assert "plank" in result.output

    def test_show_program_and_library(self, imported):
        program = _json(["show-program", "--json", "--data-dir", str(imported)])
        library = _json(["library", "--json", "--data-dir", str(imported)])

        assert program["id"] == 1
        assert library["push_up"] == {"type": "reps", "rest_s": 90}

    def test_log_workout_and_history(self, imported):
        log = _json([
            "log-workout",
            "--week", "1",
            "--day", "monday",
            "--values", "30,30,25,8,8@5",
            "--duration-min", "20",
            "--date", "2026-03-02",
            "--json",
            "--data-dir", str(imported),
        ])

        assert log["id"] == 1
        assert log["totalDurationSeconds"] == 1200
        assert log["completed"] is False
        assert log["date"].startswith("2026-03-02")
        push_sets = log["exercises"][1]["sets"]
        assert [s["completed"] for s in push_sets] == [True, True, False]
        assert push_sets[1]["weight_kg"] == 5.0

        logs = _json(["history", "--json", "--data-dir", str(imported)])
        assert [entry["id"] for entry in logs] == [1]

    def test_log_workout_defaults_complete(self, imported):
        log = _json(["log-workout", "--day", "thursday", "--json", "--data-dir", str(imported)])

        assert log["completed"] is True
        assert [s["value"] for s in log["exercises"][0]["sets"]] == [10, 10]

    def test_log_workout_bad_values(self, imported):
        result = runner.invoke(app, [
            "log-workout", "--day", "monday", "--values", "ten", "--data-dir", str(imported),
        ])

        assert result.exit_code == 1
        assert (imported / "logs.jsonl").read_text() == ""

    def test_current_week_follows_logs(self, imported):
        for _ in range(3):
            runner.invoke(app, ["log-workout", "--day", "monday", "--data-dir", str(imported)])

        out = _json(["week", "--json", "--data-dir", str(imported)])

        assert out["week"] == 2

    def test_delete_log(self, imported):
        runner.invoke(app, ["log-workout", "--day", "monday", "--data-dir", str(imported)])

        result = runner.invoke(app, ["delete-log", "1", "--force", "--data-dir", str(imported)])

        assert result.exit_code == 0
        assert _json(["history", "--json", "--data-dir", str(imported)]) == []

    def test_delete_missing_log(self, imported):
        result = runner.invoke(app, ["delete-log", "5", "--force", "--data-dir", str(imported)])

        assert result.exit_code == 1

    def test_stats(self, imported):
        runner.invoke(app, [
            "log-workout", "--day", "monday", "-m", "30", "--data-dir", str(imported),
        ])

        out = _json(["stats", "--exercise", "plank", "--json", "--data-dir", str(imported)])

        assert out["total_workouts"] == 1
        assert out["total_minutes"] == 30
        assert out["current_streak_days"] == 1
        assert out["volume_trend"] == [6]
        assert out["progress"][0]["avg_value"] == 30

        result = runner.invoke(app, ["stats", "--data-dir", str(imported)])
        assert result.exit_code == 0

    def test_stats_unknown_exercise(self, imported):
        result = runner.invoke(app, ["stats", "-e", "burpee", "--data-dir", str(imported)])

        assert result.exit_code == 1

    def test_export(self, imported):
        target = imported / "backup.json"

        result = runner.invoke(app, ["export", "-o", str(target), "--data-dir", str(imported)])

        assert result.exit_code == 0
        backup = json.loads(target.read_text())
        assert backup["program"]["program_name"] == "Core & Push Foundations"
        assert backup["logs"] == []

    def test_reset(self, imported):
        result = runner.invoke(app, ["reset", "--force", "--data-dir", str(imported)])

        assert result.exit_code == 0
        assert "All data cleared" in result.output
        assert (imported / "programs.jsonl").read_text() == ""

    def test_reset_cancelled(self, imported):
        result = runner.invoke(app, ["reset", "--data-dir", str(imported)], input="n\n")

        assert result.exit_code == 0
        assert (imported / "programs.jsonl").read_text() != ""


class TestParseSetEntry:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("12", (12, None)),
            ("12@20", (12, 20.0)),
            ("12 @ +20kg", (12, 20.0)),
            ("7.5", (7.5, None)),
        ],
    )
    def test_valid(self, raw, expected):
        assert parse_set_entry(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "12@", "-3"])
    def test_invalid(self, raw):
        with pytest.raises(ValidationError):
            parse_set_entry(raw)


class TestInteractiveWorkout:
    def test_stop_early_saves_partial_log(self, imported):
        # day prompt, one set, its rest, then quit
        result = runner.invoke(
            app, ["workout", "--data-dir", str(imported)], input="\n\n\nq\n"
        )

        assert result.exit_code == 0, result.output
        logs = _json(["history", "--json", "--data-dir", str(imported)])
        assert len(logs) == 1
        assert logs[0]["day"] == "monday"
        assert logs[0]["completed"] is False
        assert [s["completed"] for s in logs[0]["exercises"][0]["sets"]] == [True, False, False]


class TestDayNames:
    """Day keys keep the spelling of the program document."""

    @pytest.fixture
    def capitalised(self, data_dir, program_dict):
        days = program_dict["weekly_targets"][0]["day_prescription"]
        program_dict["weekly_targets"][0]["day_prescription"] = {
            "Monday": days["monday"],
            "Thursday": days["thursday"],
        }
        result = runner.invoke(
            app, ["import-program", "-", "--data-dir", str(data_dir)], input=json.dumps(program_dict)
        )
        assert result.exit_code == 0, result.output
        return data_dir

    def test_default_day_is_found(self, capitalised):
        log = _json(["log-workout", "--week", "1", "--json", "--data-dir", str(capitalised)])

        assert log["day"] == "Monday"
        assert log["completed"] is True

    def test_day_option_ignores_case(self, capitalised):
        log = _json(["log-workout", "-d", "thursday", "--json", "--data-dir", str(capitalised)])
        week = _json(["week", "--day", "MONDAY", "--json", "--data-dir", str(capitalised)])

        assert log["day"] == "Thursday"
        assert list(week["days"]) == ["Monday"]


class TestImportErrors:
    def test_non_integer_id_is_invalid_format(self, data_dir, program_dict):
        program_dict["id"] = "abc"

        result = runner.invoke(
            app, ["import-program", "-", "--data-dir", str(data_dir)], input=json.dumps(program_dict)
        )

        assert result.exit_code == 1
        assert "Invalid program format" in result.output
        assert (data_dir / "programs.jsonl").read_text() == ""
