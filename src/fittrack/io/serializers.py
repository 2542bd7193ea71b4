"""
JSON serialization for programs and workout logs.

Handles conversion between dataclasses and JSON-compatible dicts, and the
validation applied when a user imports a program document.  Field names
follow the program JSON format exactly.
"""

import json
from typing import Any

from ..core.models import (
    EXERCISE_TYPES,
    DayPrescription,
    ExerciseDefinition,
    ExerciseLog,
    PrescriptionItem,
    SessionStructure,
    SetLog,
    TrainingProgram,
    WeekPrescription,
    WorkoutLog,
)


_ITEM_OPTIONAL_INT_FIELDS = ("reps", "hold_seconds", "reps_each_side", "hold_seconds_each_side")
_ITEM_OPTIONAL_FLOAT_FIELDS = ("weight_kg", "distance_m")

_PROGRAM_REQUIRED_FIELDS = (
    "program_name",
    "duration_weeks",
    "goal_priority",
    "session_structure",
    "exercise_library",
    "weekly_targets",
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def _require_mapping(value: Any, where: str) -> dict:
    if not isinstance(value, dict):
        raise ValidationError(f"{where} must be an object, got {type(value).__name__}")
    return value


def _require_list(value: Any, where: str) -> list:
    if not isinstance(value, list):
        raise ValidationError(f"{where} must be a list, got {type(value).__name__}")
    return value


def _require_int(value: Any, where: str) -> int:
    """
    Validate an integer field.

    Integral floats (e.g. 30.0) are accepted; booleans are not.

    Raises:
        ValidationError: If value is not an integer
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{where} must be an integer, got {value!r}")
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"{where} must be an integer, got {value!r}")
    return int(value)


def _require_number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{where} must be a number, got {value!r}")
    return float(value)


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}")
    return value


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}")
    return value


# =============================================================================
# PROGRAM
# =============================================================================


def exercise_definition_to_dict(definition: ExerciseDefinition) -> dict[str, Any]:
    """Convert ExerciseDefinition to JSON-compatible dict, omitting absent fields."""
    d: dict[str, Any] = {"type": definition.type, "rest_s": definition.rest_s}
    if definition.time_limit_s is not None:
        d["time_limit_s"] = definition.time_limit_s
    if definition.description is not None:
        d["description"] = definition.description
    if definition.gif_url is not None:
        d["gif_url"] = definition.gif_url
    return d


def dict_to_exercise_definition(data: Any, name: str = "?") -> ExerciseDefinition:
    """
    Convert dict to ExerciseDefinition.

    Raises:
        ValidationError: If type is unknown or rest_s is missing/negative
    """
    where = f"exercise_library[{name!r}]"
    data = _require_mapping(data, where)

    ex_type = data.get("type")
    if ex_type not in EXERCISE_TYPES:
        raise ValidationError(
            f"{where}.type must be one of {EXERCISE_TYPES}, got {ex_type!r}"
        )
    if "rest_s" not in data:
        raise ValidationError(f"{where}.rest_s is required")
    rest_s = _require_int(data["rest_s"], f"{where}.rest_s")
    validate_non_negative(rest_s, f"{where}.rest_s")

    time_limit_s = data.get("time_limit_s")
    if time_limit_s is not None:
        time_limit_s = _require_int(time_limit_s, f"{where}.time_limit_s")
        validate_non_negative(time_limit_s, f"{where}.time_limit_s")

    return ExerciseDefinition(
        type=ex_type,
        rest_s=rest_s,
        time_limit_s=time_limit_s,
        description=data.get("description"),
        gif_url=data.get("gif_url"),
    )


def prescription_item_to_dict(item: PrescriptionItem) -> dict[str, Any]:
    """Convert PrescriptionItem to dict; only populated fields are written."""
    d: dict[str, Any] = {"name": item.name, "sets": item.sets}
    for key in _ITEM_OPTIONAL_INT_FIELDS + _ITEM_OPTIONAL_FLOAT_FIELDS:
        value = getattr(item, key)
        if value is not None:
            d[key] = value
    return d


def dict_to_prescription_item(data: Any, where: str = "item") -> PrescriptionItem:
    """
    Convert dict to PrescriptionItem.

    The exercise name is not checked against the library here; a dangling
    name surfaces when the item is performed.

    Raises:
        ValidationError: If name or sets is missing or invalid
    """
    data = _require_mapping(data, where)
    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ValidationError(f"{where}.name must be a non-empty string")
    if "sets" not in data:
        raise ValidationError(f"{where}.sets is required")
    sets = _require_int(data["sets"], f"{where}.sets")
    validate_positive(sets, f"{where}.sets")

    ints = {
        key: _require_int(data[key], f"{where}.{key}")
        for key in _ITEM_OPTIONAL_INT_FIELDS
        if data.get(key) is not None
    }
    floats = {
        key: _require_number(data[key], f"{where}.{key}")
        for key in _ITEM_OPTIONAL_FLOAT_FIELDS
        if data.get(key) is not None
    }
    for key, value in {**ints, **floats}.items():
        validate_non_negative(value, f"{where}.{key}")

    return PrescriptionItem(name=name, sets=sets, **ints, **floats)


def _dict_to_day_prescription(data: Any, where: str) -> DayPrescription:
    data = _require_mapping(data, where)
    days: DayPrescription = {}
    for day, items in data.items():
        items = _require_list(items, f"{where}[{day!r}]")
        days[day] = [
            dict_to_prescription_item(item, f"{where}[{day!r}][{i}]") for i, item in enumerate(items)
        ]
    return days


def week_prescription_to_dict(entry: WeekPrescription) -> dict[str, Any]:
    """Convert WeekPrescription to dict."""
    d: dict[str, Any] = {"week": entry.week}
    if entry.day_prescription is not None:
        d["day_prescription"] = {
            day: [prescription_item_to_dict(item) for item in items]
            for day, items in entry.day_prescription.items()
        }
    if entry.delta_from_previous_week is not None:
        d["delta_from_previous_week"] = dict(entry.delta_from_previous_week)
    return d


def dict_to_week_prescription(data: Any, index: int = 0) -> WeekPrescription:
    """
    Convert dict to WeekPrescription.

    Delta values are kept as given; they are parsed by the resolver when
    the week is replayed.

    Raises:
        ValidationError: If week is invalid or both prescription kinds are present
    """
    where = f"weekly_targets[{index}]"
    data = _require_mapping(data, where)
    if "week" not in data:
        raise ValidationError(f"{where}.week is required")
    week = _require_int(data["week"], f"{where}.week")
    validate_positive(week, f"{where}.week")
    where = f"{where} (week {week})"

    raw_days = data.get("day_prescription")
    raw_delta = data.get("delta_from_previous_week")
    if raw_days is not None and raw_delta is not None:
        raise ValidationError(
            f"{where} has both day_prescription and delta_from_previous_week; use one"
        )

    delta: dict[str, str] | None = None
    if raw_delta is not None:
        delta = dict(_require_mapping(raw_delta, f"{where}.delta_from_previous_week"))

    return WeekPrescription(
        week=week,
        day_prescription=(
            _dict_to_day_prescription(raw_days, f"{where}.day_prescription")
            if raw_days is not None
            else None
        ),
        delta_from_previous_week=delta,
    )


def program_to_dict(program: TrainingProgram) -> dict[str, Any]:
    """Convert TrainingProgram to its JSON document form."""
    d: dict[str, Any] = {}
    if program.id is not None:
        d["id"] = program.id
    d.update(
        {
            "program_name": program.program_name,
            "duration_weeks": program.duration_weeks,
            "goal_priority": list(program.goal_priority),
            "session_structure": {"main_minutes": program.session_structure.main_minutes},
            "exercise_library": {
                name: exercise_definition_to_dict(definition)
                for name, definition in program.exercise_library.items()
            },
            "weekly_targets": [week_prescription_to_dict(t) for t in program.weekly_targets],
        }
    )
    return d


def dict_to_program(data: Any) -> TrainingProgram:
    """
    Convert a program document to TrainingProgram.

    Raises:
        ValidationError: If the document does not match the program format
    """
    data = _require_mapping(data, "program")
    missing = [key for key in _PROGRAM_REQUIRED_FIELDS if key not in data]
    if missing:
        raise ValidationError(f"Program is missing required fields: {', '.join(missing)}")

    name = data["program_name"]
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("program_name must be a non-empty string")

    duration_weeks = _require_int(data["duration_weeks"], "duration_weeks")
    validate_positive(duration_weeks, "duration_weeks")

    goals = _require_list(data["goal_priority"], "goal_priority")

    structure = _require_mapping(data["session_structure"], "session_structure")
    if "main_minutes" not in structure:
        raise ValidationError("session_structure.main_minutes is required")
    main_minutes = _require_int(structure["main_minutes"], "session_structure.main_minutes")
    validate_positive(main_minutes, "session_structure.main_minutes")

    library = {
        ex_name: dict_to_exercise_definition(definition, ex_name)
        for ex_name, definition in _require_mapping(data["exercise_library"], "exercise_library").items()
    }

    weekly_targets = [
        dict_to_week_prescription(entry, i)
        for i, entry in enumerate(_require_list(data["weekly_targets"], "weekly_targets"))
    ]

    program_id = data.get("id")
    return TrainingProgram(
        program_name=name,
        duration_weeks=duration_weeks,
        goal_priority=[str(g) for g in goals],
        session_structure=SessionStructure(main_minutes=main_minutes),
        exercise_library=library,
        weekly_targets=weekly_targets,
        id=_require_int(program_id, "id") if program_id is not None else None,
    )


def parse_program_json(text: str) -> TrainingProgram:
    """
    Parse and validate a program JSON document.

    Raises:
        ValidationError: If the text is not JSON or not a valid program
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    return dict_to_program(data)


# =============================================================================
# WORKOUT LOGS
# =============================================================================


def set_log_to_dict(set_log: SetLog) -> dict[str, Any]:
    """Convert SetLog to dict; weight/distance only when recorded."""
    d: dict[str, Any] = {
        "completed": set_log.completed,
        "value": set_log.value,
        "timestamp": set_log.timestamp,
    }
    if set_log.weight_kg is not None:
        d["weight_kg"] = set_log.weight_kg
    if set_log.distance_m is not None:
        d["distance_m"] = set_log.distance_m
    return d


def dict_to_set_log(data: dict[str, Any]) -> SetLog:
    """
    Convert dict to SetLog.

    Raises:
        ValidationError: If data is invalid
    """
    value = _require_number(data.get("value", 0), "value")
    validate_non_negative(value, "value")
    weight = data.get("weight_kg")
    distance = data.get("distance_m")
    return SetLog(
        completed=bool(data.get("completed", False)),
        value=int(value) if value.is_integer() else value,
        timestamp=str(data.get("timestamp", "")),
        weight_kg=validate_non_negative(_require_number(weight, "weight_kg"), "weight_kg")
        if weight is not None
        else None,
        distance_m=validate_non_negative(_require_number(distance, "distance_m"), "distance_m")
        if distance is not None
        else None,
    )


def workout_log_to_dict(log: WorkoutLog) -> dict[str, Any]:
    """Convert WorkoutLog to JSON-compatible dict."""
    d: dict[str, Any] = {}
    if log.id is not None:
        d["id"] = log.id
    d.update(
        {
            "programId": log.program_id,
            "date": log.date,
            "week": log.week,
            "day": log.day,
            "exercises": [
                {"name": ex.name, "sets": [set_log_to_dict(s) for s in ex.sets]}
                for ex in log.exercises
            ],
            "totalDurationSeconds": log.total_duration_seconds,
            "completed": log.completed,
        }
    )
    return d


def dict_to_workout_log(data: dict[str, Any]) -> WorkoutLog:
    """
    Convert dict to WorkoutLog.

    Raises:
        ValidationError: If data is invalid
    """
    data = _require_mapping(data, "workout log")
    for key in ("date", "week", "day"):
        if key not in data:
            raise ValidationError(f"Workout log is missing {key!r}")
    week = _require_int(data["week"], "week")
    validate_positive(week, "week")
    duration = _require_int(data.get("totalDurationSeconds", 0), "totalDurationSeconds")
    validate_non_negative(duration, "totalDurationSeconds")

    exercises: list[ExerciseLog] = []
    for i, ex in enumerate(_require_list(data.get("exercises", []), "exercises")):
        ex = _require_mapping(ex, f"exercises[{i}]")
        if "name" not in ex:
            raise ValidationError(f"exercises[{i}].name is required")
        exercises.append(
            ExerciseLog(
                name=str(ex["name"]),
                sets=[
                    dict_to_set_log(_require_mapping(s, f"exercises[{i}].sets[]"))
                    for s in _require_list(ex.get("sets", []), f"exercises[{i}].sets")
                ],
            )
        )
    program_id = data.get("programId")
    log_id = data.get("id")
    try:
        return WorkoutLog(
            program_id=_require_int(program_id, "programId") if program_id is not None else None,
            date=str(data["date"]),
            week=week,
            day=str(data["day"]),
            exercises=exercises,
            total_duration_seconds=duration,
            completed=bool(data.get("completed", False)),
            id=_require_int(log_id, "id") if log_id is not None else None,
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e


def to_json_line(data: dict[str, Any]) -> str:
    """Serialize a record to a single JSON line (no trailing newline)."""
    return json.dumps(data, separators=(",", ":"))
