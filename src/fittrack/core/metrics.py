"""
History analytics over logged workouts.

Pure functions: totals, averages, streaks and per-exercise progress
series used by the `stats` command.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime

from .models import WorkoutLog


@dataclass
class ProgressPoint:
    """One workout's result for a single exercise."""

    date: str        # YYYY-MM-DD
    avg_value: float  # Mean of all set values (reps or seconds), 1 decimal
    max_weight_kg: float


def _log_date(log: WorkoutLog) -> date:
    return datetime.fromisoformat(log.day_key).date()


def sort_logs(logs: list[WorkoutLog]) -> list[WorkoutLog]:
    """Logs in chronological order (stable for equal timestamps)."""
    return sorted(logs, key=lambda log: log.date)


def completed_sets(log: WorkoutLog) -> int:
    """Number of completed sets across all exercises of a workout."""
    return sum(len(ex.completed_sets) for ex in log.exercises)


def total_minutes(logs: list[WorkoutLog]) -> int:
    """Total training time in whole minutes."""
    return round(sum(log.total_duration_seconds for log in logs) / 60)


def average_duration_minutes(logs: list[WorkoutLog]) -> int:
    """Mean workout duration in whole minutes (0 with no logs)."""
    if not logs:
        return 0
    return round(sum(log.total_duration_seconds for log in logs) / len(logs) / 60)


def current_streak(logs: list[WorkoutLog], today: date | None = None) -> int:
    """
    Consecutive training days ending today or yesterday.

    Several workouts on the same day count once.  If the latest workout is
    older than yesterday the streak is 0.
    """
    if not logs:
        return 0
    if today is None:
        today = date.today()

    days = sorted({_log_date(log) for log in logs}, reverse=True)
    if (today - days[0]).days > 1:
        return 0

    streak = 1
    for prev, cur in zip(days, days[1:]):
        if (prev - cur).days != 1:
            break
        streak += 1
    return streak


def volume_trend(logs: list[WorkoutLog], last: int = 10) -> list[int]:
    """Completed sets per workout for the most recent ``last`` workouts."""
    if last <= 0:
        return []
    return [completed_sets(log) for log in sort_logs(logs)[-last:]]


def duration_series(logs: list[WorkoutLog], last: int = 7) -> list[tuple[str, int]]:
    """(date, minutes) for the most recent ``last`` workouts."""
    if last <= 0:
        return []
    return [
        (log.day_key, round(log.total_duration_seconds / 60))
        for log in sort_logs(logs)[-last:]
    ]


def exercise_names(logs: list[WorkoutLog]) -> list[str]:
    """Distinct exercise names in first-seen order."""
    seen: dict[str, None] = {}
    for log in sort_logs(logs):
        for ex in log.exercises:
            seen.setdefault(ex.name, None)
    return list(seen)


def exercise_progress(logs: list[WorkoutLog], name: str) -> list[ProgressPoint]:
    """
    Per-workout progress for one exercise.

    The average covers every logged set of the exercise (uncompleted sets
    count as 0), the weight is the heaviest set.
    """
    points: list[ProgressPoint] = []
    for log in sort_logs(logs):
        ex = next((e for e in log.exercises if e.name == name), None)
        if ex is None:
            continue
        avg = sum(s.value for s in ex.sets) / len(ex.sets) if ex.sets else 0.0
        max_weight = max((s.weight_kg or 0.0 for s in ex.sets), default=0.0)
        points.append(ProgressPoint(date=log.day_key, avg_value=round(avg, 1), max_weight_kg=max_weight))
    return points
