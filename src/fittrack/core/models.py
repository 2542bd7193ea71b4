"""
Data models for fittrack.

Dataclasses for the imported training program (exercise library plus
weekly targets) and for the workout logs recorded against it.

Prescription items are deliberately not validated on construction: the
resolver replays deltas that may create or zero out fields, and the
result must still be representable.  Import-time validation lives in
io/serializers.py.
"""

from dataclasses import dataclass, field
from typing import Literal

from .errors import UnknownExerciseError

ExerciseType = Literal["hold_seconds", "reps", "hold_seconds_each_side", "reps_each_side"]
EXERCISE_TYPES: tuple[str, ...] = ("hold_seconds", "reps", "hold_seconds_each_side", "reps_each_side")

# Workload fields in display precedence order (see format_target).
WORKLOAD_FIELDS: tuple[str, ...] = ("reps", "reps_each_side", "hold_seconds", "hold_seconds_each_side")

# day name -> ordered exercise list
DayPrescription = dict[str, list["PrescriptionItem"]]


@dataclass(frozen=True)
class ExerciseDefinition:
    """
    Static metadata for one named exercise.

    ``type`` says which workload field of a PrescriptionItem is meaningful.
    """

    type: ExerciseType
    rest_s: int                     # Rest after each set, seconds
    time_limit_s: int | None = None  # Soft execution limit (display/warning only)
    description: str | None = None
    gif_url: str | None = None

    @property
    def is_hold(self) -> bool:
        return self.type in ("hold_seconds", "hold_seconds_each_side")

    @property
    def is_each_side(self) -> bool:
        return self.type.endswith("_each_side")


@dataclass
class PrescriptionItem:
    """One exercise's prescribed workload for a specific day."""

    name: str  # Key into TrainingProgram.exercise_library
    sets: int
    reps: int | None = None
    hold_seconds: int | None = None
    reps_each_side: int | None = None
    hold_seconds_each_side: int | None = None
    weight_kg: float | None = None
    distance_m: float | None = None

    @property
    def target_value(self) -> int:
        """First present workload value in display precedence order, else 0."""
        for name in WORKLOAD_FIELDS:
            value = getattr(self, name)
            if value is not None:
                return value
        return 0


@dataclass
class WeekPrescription:
    """
    One entry of TrainingProgram.weekly_targets.

    Supplies either an absolute ``day_prescription`` snapshot or a
    ``delta_from_previous_week`` mapping such as {"plank_hold_seconds": "+5"}.
    """

    week: int
    day_prescription: DayPrescription | None = None
    delta_from_previous_week: dict[str, str] | None = None

    @property
    def is_snapshot(self) -> bool:
        return self.day_prescription is not None

    @property
    def is_delta(self) -> bool:
        return self.day_prescription is None and self.delta_from_previous_week is not None


@dataclass
class SessionStructure:
    """Time budget for a workout session."""

    main_minutes: int


@dataclass
class TrainingProgram:
    """
    A multi-week training plan as imported by the user.

    ``id`` is the surrogate key assigned by the program store on save.
    """

    program_name: str
    duration_weeks: int
    goal_priority: list[str]
    session_structure: SessionStructure
    exercise_library: dict[str, ExerciseDefinition] = field(default_factory=dict)
    weekly_targets: list[WeekPrescription] = field(default_factory=list)
    id: int | None = None

    def exercise(self, name: str) -> ExerciseDefinition:
        """
        Return the library definition for ``name``.

        Raises:
            UnknownExerciseError: If the program does not define the exercise
        """
        try:
            return self.exercise_library[name]
        except KeyError:
            raise UnknownExerciseError(name) from None

    @property
    def days(self) -> list[str]:
        """Day names used by any snapshot, in first-seen order."""
        seen: dict[str, None] = {}
        for entry in self.weekly_targets:
            for day in entry.day_prescription or {}:
                seen.setdefault(day, None)
        return list(seen)

    @property
    def session_limit_seconds(self) -> int:
        return self.session_structure.main_minutes * 60

    def week_numbers(self) -> list[int]:
        """Sorted distinct week numbers that have an entry."""
        return sorted({t.week for t in self.weekly_targets})


@dataclass
class SetLog:
    """
    One logged set.

    ``value`` is reps or seconds depending on the exercise type.
    """

    completed: bool = False
    value: float = 0
    timestamp: str = ""  # ISO datetime, empty until completed
    weight_kg: float | None = None
    distance_m: float | None = None

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.value < 0:
            raise ValueError("value must be non-negative")
        if self.weight_kg is not None and self.weight_kg < 0:
            raise ValueError("weight_kg must be non-negative")
        if self.distance_m is not None and self.distance_m < 0:
            raise ValueError("distance_m must be non-negative")


@dataclass
class ExerciseLog:
    """Logged sets for one exercise of a workout."""

    name: str
    sets: list[SetLog] = field(default_factory=list)

    @property
    def completed_sets(self) -> list[SetLog]:
        return [s for s in self.sets if s.completed]


@dataclass
class WorkoutLog:
    """A finished (or abandoned) workout session."""

    program_id: int | None
    date: str  # ISO datetime
    week: int
    day: str
    exercises: list[ExerciseLog] = field(default_factory=list)
    total_duration_seconds: int = 0
    completed: bool = False
    id: int | None = None

    def __post_init__(self) -> None:
        """Validate workout data."""
        self._validate_date(self.date)
        if self.week < 1:
            raise ValueError("week must be positive")
        if self.total_duration_seconds < 0:
            raise ValueError("total_duration_seconds must be non-negative")

    @staticmethod
    def _validate_date(date_str: str) -> None:
        """Validate date string is an ISO date or datetime."""
        from datetime import datetime

        try:
            datetime.fromisoformat(date_str.replace("Z", "+00:00"))
        except ValueError as e:
            raise ValueError(f"Invalid date: {date_str}. Expected ISO format") from e

    @property
    def day_key(self) -> str:
        """Calendar date part (YYYY-MM-DD) of ``date``."""
        return self.date[:10]
