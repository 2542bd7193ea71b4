"""Exception hierarchy for program data and workout sessions."""

from __future__ import annotations


class ProgramError(Exception):
    """Base exception for problems with a training program or its use."""


class ParseError(ProgramError, ValueError):
    """A delta value is not a signed integer string."""

    def __init__(self, key: str, value: object) -> None:
        super().__init__(f"Invalid delta for {key!r}: {value!r} is not a signed integer")
        self.key = key
        self.value = value


class UnknownExerciseError(ProgramError, KeyError):
    """A prescription item names an exercise missing from exercise_library."""

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Exercise {self.name!r} is not defined in the program's exercise_library"


class SessionStateError(ProgramError, RuntimeError):
    """An operation is not valid in the workout session's current state."""
