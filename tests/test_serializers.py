"""
Tests for JSON conversion and import-time validation.
"""

import json

import pytest

from fittrack.core.models import ExerciseLog, PrescriptionItem, SetLog, WorkoutLog
from fittrack.core.prescription import resolve_prescription
from fittrack.io.serializers import (
    ValidationError,
    dict_to_program,
    dict_to_workout_log,
    parse_program_json,
    prescription_item_to_dict,
    program_to_dict,
    workout_log_to_dict,
)


class TestProgramImport:
    """Converting program documents into TrainingProgram."""

    def test_parses_sample_program(self, program_json):
        program = parse_program_json(program_json)

        assert program.program_name == "Core & Push Foundations"
        assert program.duration_weeks == 4
        assert program.session_structure.main_minutes == 30
        assert program.exercise_library["plank"].time_limit_s == 120
        assert program.exercise_library["push_up"].time_limit_s is None
        assert [t.week for t in program.weekly_targets] == [1, 2, 4]
        assert program.days == ["monday", "thursday"]
        assert program.weekly_targets[1].delta_from_previous_week == {
            "plank_hold_seconds": "+10",
            "push_up_reps": "+2",
        }

    def test_items_keep_only_given_fields(self, program_dict):
        program = dict_to_program(program_dict)
        plank = program.weekly_targets[0].day_prescription["monday"][0]

        assert plank == PrescriptionItem(name="plank", sets=3, hold_seconds=30)

    def test_parsed_program_resolves(self, program_dict):
        program = dict_to_program(program_dict)

        week2 = resolve_prescription(program, 2)

        assert week2["monday"][0].hold_seconds == 40
        assert week2["monday"][1].reps == 10
        assert week2["thursday"][0].reps_each_side == 10

    def test_round_trip_preserves_document(self, program_dict):
        assert program_to_dict(dict_to_program(program_dict)) == program_dict

    def test_invalid_json(self):
        with pytest.raises(ValidationError, match="Invalid JSON"):
            parse_program_json("{not json")

    def test_top_level_must_be_object(self):
        with pytest.raises(ValidationError):
            parse_program_json("[1, 2, 3]")

    @pytest.mark.parametrize(
        "field",
        ["program_name", "duration_weeks", "goal_priority", "session_structure", "exercise_library", "weekly_targets"],
    )
    def test_missing_required_field(self, program_dict, field):
        del program_dict[field]

        with pytest.raises(ValidationError, match=field):
            dict_to_program(program_dict)

    def test_missing_main_minutes(self, program_dict):
        program_dict["session_structure"] = {}

        with pytest.raises(ValidationError, match="main_minutes"):
            dict_to_program(program_dict)

    def test_unknown_exercise_type(self, program_dict):
        program_dict["exercise_library"]["plank"]["type"] = "minutes"

        with pytest.raises(ValidationError, match="type"):
            dict_to_program(program_dict)

    def test_negative_rest(self, program_dict):
        program_dict["exercise_library"]["plank"]["rest_s"] = -5

        with pytest.raises(ValidationError, match="rest_s"):
            dict_to_program(program_dict)

    def test_week_must_be_positive(self, program_dict):
        program_dict["weekly_targets"][1]["week"] = 0

        with pytest.raises(ValidationError, match="week"):
            dict_to_program(program_dict)

    def test_both_prescription_kinds_rejected(self, program_dict):
        program_dict["weekly_targets"][1]["day_prescription"] = {"monday": []}

        with pytest.raises(ValidationError, match="both"):
            dict_to_program(program_dict)

    def test_item_requires_positive_sets(self, program_dict):
        program_dict["weekly_targets"][0]["day_prescription"]["monday"][0]["sets"] = 0

        with pytest.raises(ValidationError, match="sets"):
            dict_to_program(program_dict)

    def test_item_requires_name(self, program_dict):
        del program_dict["weekly_targets"][0]["day_prescription"]["monday"][0]["name"]

        with pytest.raises(ValidationError, match="name"):
            dict_to_program(program_dict)

    def test_item_fields_must_be_integers(self, program_dict):
        program_dict["weekly_targets"][0]["day_prescription"]["monday"][0]["hold_seconds"] = "30"

        with pytest.raises(ValidationError, match="hold_seconds"):
            dict_to_program(program_dict)

    def test_integral_float_accepted(self, program_dict):
        program_dict["weekly_targets"][0]["day_prescription"]["monday"][0]["hold_seconds"] = 30.0

        program = dict_to_program(program_dict)

        assert program.weekly_targets[0].day_prescription["monday"][0].hold_seconds == 30

    def test_dangling_exercise_name_is_accepted(self, program_dict):
        program_dict["weekly_targets"][0]["day_prescription"]["monday"].append(
            {"name": "burpee", "sets": 2, "reps": 5}
        )

        program = dict_to_program(program_dict)

        assert "burpee" not in program.exercise_library

    def test_malformed_delta_accepted_at_import(self, program_dict):
        program_dict["weekly_targets"][1]["delta_from_previous_week"]["plank_hold_seconds"] = "lots"

        program = dict_to_program(program_dict)

        assert program.weekly_targets[1].delta_from_previous_week["plank_hold_seconds"] == "lots"

    def test_duplicate_weeks_accepted_quietly(self, program_dict, caplog):
        program_dict["weekly_targets"].append(
            {"week": 2, "delta_from_previous_week": {"plank_hold_seconds": "+99"}}
        )

        with caplog.at_level("WARNING"):
            program = dict_to_program(program_dict)

        assert caplog.records == []
        assert resolve_prescription(program, 2)["monday"][0].hold_seconds == 40

    @pytest.mark.parametrize("bad_id", ["abc", [1], 1.5, True])
    def test_non_integer_id(self, program_dict, bad_id):
        program_dict["id"] = bad_id

        with pytest.raises(ValidationError, match="id"):
            dict_to_program(program_dict)

    def test_supplementary_targets(self):
        item = PrescriptionItem(name="carry", sets=2, distance_m=40.0, weight_kg=24.0)

        assert prescription_item_to_dict(item) == {
            "name": "carry",
            "sets": 2,
            "weight_kg": 24.0,
            "distance_m": 40.0,
        }


class TestWorkoutLogs:
    """Converting workout logs to and from their stored form."""

    def _log(self) -> WorkoutLog:
        return WorkoutLog(
            program_id=1,
            date="2026-03-02T18:30:00",
            week=2,
            day="monday",
            exercises=[
                ExerciseLog(
                    name="push_up",
                    sets=[
                        SetLog(completed=True, value=10, timestamp="2026-03-02T18:31:00", weight_kg=5.0),
                        SetLog(),
                    ],
                )
            ],
            total_duration_seconds=1500,
            completed=False,
            id=7,
        )

    def test_stored_field_names(self):
        data = workout_log_to_dict(self._log())

        assert data["programId"] == 1
        assert data["totalDurationSeconds"] == 1500
        assert data["exercises"][0]["sets"][0] == {
            "completed": True,
            "value": 10,
            "timestamp": "2026-03-02T18:31:00",
            "weight_kg": 5.0,
        }
        assert "weight_kg" not in data["exercises"][0]["sets"][1]

    def test_round_trip(self):
        log = self._log()

        assert dict_to_workout_log(json.loads(json.dumps(workout_log_to_dict(log)))) == log

    def test_missing_field(self):
        data = workout_log_to_dict(self._log())
        del data["day"]

        with pytest.raises(ValidationError, match="day"):
            dict_to_workout_log(data)

    def test_bad_date(self):
        data = workout_log_to_dict(self._log())
        data["date"] = "yesterday"

        with pytest.raises(ValidationError):
            dict_to_workout_log(data)

    @pytest.mark.parametrize("key", ["id", "programId"])
    @pytest.mark.parametrize("bad_id", ["abc", [1], {"n": 1}])
    def test_non_integer_ids(self, key, bad_id):
        data = workout_log_to_dict(self._log())
        data[key] = bad_id

        with pytest.raises(ValidationError, match=key):
            dict_to_workout_log(data)

    def test_negative_value(self):
        data = workout_log_to_dict(self._log())
        data["exercises"][0]["sets"][0]["value"] = -1

        with pytest.raises(ValidationError):
            dict_to_workout_log(data)
