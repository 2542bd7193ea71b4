"""
Prescription resolver and target formatter.

A program's ``weekly_targets`` is a sparse list of absolute day snapshots
and incremental deltas.  resolve_prescription() replays weeks 1..N in
ascending order and returns the concrete exercises for every training day
of week N:

    week entry with day_prescription         → working = deep copy of snapshot
    week entry with delta_from_previous_week → add each delta to matching items
    no entry for the week                    → unchanged

The replay is a fold: each step returns a new mapping, and neither the
program nor any earlier step's mapping is mutated.
"""

from __future__ import annotations

import copy
import dataclasses
import logging
import math
import re
from dataclasses import dataclass
from functools import reduce
from typing import Mapping

from .errors import ParseError
from .models import DayPrescription, PrescriptionItem, TrainingProgram, WeekPrescription

logger = logging.getLogger(__name__)

# Delta-key suffix → PrescriptionItem field, most specific first.  Exercise
# names may contain underscores ("push_up"), so the key is split by suffix
# rather than at a fixed delimiter.
DELTA_SUFFIXES: tuple[tuple[str, str], ...] = (
    ("_hold_seconds_each_side", "hold_seconds_each_side"),
    ("_reps_each_side", "reps_each_side"),
    ("_hold_seconds", "hold_seconds"),
    ("_reps", "reps"),
    ("_sets", "sets"),
)

_DELTA_VALUE_RE = re.compile(r"^\s*[+-]?\d+\s*$")


@dataclass(frozen=True)
class DeltaKey:
    """A parsed ``<exercise>_<field>`` delta key."""

    exercise: str
    field: str


def parse_delta_key(key: str) -> DeltaKey | None:
    """
    Split a delta key into exercise name and item field.

    Examples:
        "plank_hold_seconds"      → DeltaKey("plank", "hold_seconds")
        "push_up_reps"            → DeltaKey("push_up", "reps")
        "lunge_reps_each_side"    → DeltaKey("lunge", "reps_each_side")

    Returns None when no recognised suffix matches or the exercise part
    would be empty.
    """
    for suffix, field in DELTA_SUFFIXES:
        if key.endswith(suffix) and len(key) > len(suffix):
            return DeltaKey(exercise=key[: -len(suffix)], field=field)
    return None


def parse_delta_value(key: str, raw: object) -> int:
    """
    Parse a signed integer delta such as "+5", "-2" or "3".

    JSON integers are accepted as-is.

    Raises:
        ParseError: If the value is not a signed integer
    """
    if isinstance(raw, bool):
        raise ParseError(key, raw)
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str) and _DELTA_VALUE_RE.match(raw):
        return int(raw.strip())
    raise ParseError(key, raw)


def _parse_deltas(deltas: Mapping[str, object], names: set[str]) -> list[tuple[DeltaKey, int]]:
    """Parse the deltas that target one of ``names``; the rest are never read."""
    parsed: list[tuple[DeltaKey, int]] = []
    for key, raw in deltas.items():
        delta_key = parse_delta_key(key)
        if delta_key is None:
            logger.debug("Ignoring delta key %r: no recognised field suffix", key)
            continue
        if delta_key.exercise not in names:
            logger.debug("Ignoring delta key %r: no %r item this week", key, delta_key.exercise)
            continue
        parsed.append((delta_key, parse_delta_value(key, raw)))
    return parsed


def _apply_to_item(item: PrescriptionItem, deltas: list[tuple[DeltaKey, int]]) -> PrescriptionItem:
    changes: dict[str, int] = {}
    for delta_key, amount in deltas:
        if delta_key.exercise != item.name:
            continue
        current = changes.get(delta_key.field, getattr(item, delta_key.field))
        # An absent field counts as 0, so a delta can introduce a new field.
        changes[delta_key.field] = (current if current is not None else 0) + amount
    return dataclasses.replace(item, **changes) if changes else dataclasses.replace(item)


def apply_deltas(working: DayPrescription, deltas: Mapping[str, object]) -> DayPrescription:
    """
    Return a new day prescription with ``deltas`` applied to every day.

    Items whose name matches no delta key are carried over unchanged.
    Deltas against an empty prescription are a no-op.

    Raises:
        ParseError: If a delta value for an exercise in ``working`` is not a signed integer
    """
    if not working:
        return {}
    names = {item.name for items in working.values() for item in items}
    parsed = _parse_deltas(deltas, names)
    return {day: [_apply_to_item(item, parsed) for item in items] for day, items in working.items()}


def _index_weeks(weekly_targets: list[WeekPrescription]) -> dict[int, WeekPrescription]:
    """Map week number → entry; the first entry for a duplicated week wins."""
    index: dict[int, WeekPrescription] = {}
    for entry in weekly_targets:
        if entry.week in index:
            logger.debug("Duplicate entry for week %d ignored", entry.week)
            continue
        index[entry.week] = entry
    return index


def _replay_week(working: DayPrescription, entry: WeekPrescription | None) -> DayPrescription:
    if entry is None:
        return working
    # A snapshot takes precedence when an entry carries both kinds.
    if entry.day_prescription is not None:
        return copy.deepcopy(entry.day_prescription)
    if entry.delta_from_previous_week is not None:
        return apply_deltas(working, entry.delta_from_previous_week)
    return working


def resolve_prescription(program: TrainingProgram, target_week: int) -> DayPrescription:
    """
    Compute the prescription for every training day of ``target_week``.

    Weeks are replayed in ascending numeric order regardless of the order
    of ``program.weekly_targets``.  Days never present in a snapshot are
    absent from the result.

    Args:
        program: Training program (not mutated)
        target_week: 1-based week number

    Returns:
        Mapping of day name → list of PrescriptionItem

    Raises:
        ValueError: If target_week is not a positive integer
        ParseError: If an applied delta value is malformed
    """
    if isinstance(target_week, bool) or not isinstance(target_week, int) or target_week < 1:
        raise ValueError(f"target_week must be a positive integer, got {target_week!r}")

    entries = _index_weeks(program.weekly_targets)
    return reduce(
        _replay_week,
        (entries.get(w) for w in range(1, target_week + 1)),
        {},
    )


def format_target(item: PrescriptionItem) -> str:
    """
    Short display string for an item's workload target.

    The first present field wins, in this order:
    reps → "12", reps_each_side → "8 (each)", hold_seconds → "30s",
    hold_seconds_each_side → "20s (each)"; nothing present → "0".
    """
    if item.reps is not None:
        return f"{item.reps}"
    if item.reps_each_side is not None:
        return f"{item.reps_each_side} (each)"
    if item.hold_seconds is not None:
        return f"{item.hold_seconds}s"
    if item.hold_seconds_each_side is not None:
        return f"{item.hold_seconds_each_side}s (each)"
    return "0"


def format_seconds(seconds: int | float) -> str:
    """Format a duration as m:ss, e.g. 75 → "1:15"."""
    total = max(0, int(seconds))
    mins, secs = divmod(total, 60)
    return f"{mins}:{secs:02d}"


def current_week(program: TrainingProgram, completed_workouts: int, sessions_per_week: int = 3) -> int:
    """
    Estimate the program week the user is in from the number of logged workouts.

    Every ``sessions_per_week`` logged workouts advance one week; the result
    is clamped to [1, duration_weeks].
    """
    week = math.ceil((completed_workouts + 1) / sessions_per_week)
    return max(1, min(program.duration_weeks, week))


def next_day(prescription: DayPrescription) -> str | None:
    """First day of a resolved week, or None when the week has no days."""
    return next(iter(prescription), None)


def match_day(prescription: DayPrescription, day: str) -> str | None:
    """
    Return the key in ``prescription`` naming ``day``, ignoring case.

    Day names come from the program document as written ("Monday",
    "monday", "MON"...), so lookups keep the stored spelling.
    """
    wanted = day.strip().casefold()
    return next((d for d in prescription if d.casefold() == wanted), None)
