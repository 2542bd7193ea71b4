"""
Workout session state machine.

Follows one resolved day of a program set by set: a session clock that
advances while not paused, an exercise clock that advances only while
working, and a rest countdown between sets.  Time is injected through
tick() so the same model drives an interactive CLI and tests alike.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from .config import COUNTDOWN_WARNING_SECONDS
from .errors import SessionStateError
from .models import ExerciseDefinition, ExerciseLog, PrescriptionItem, SetLog, TrainingProgram, WorkoutLog

logger = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")


class WorkoutSession:
    """
    One in-progress workout for a given program week and day.

    The session owns its WorkoutLog draft; finish() returns the final log
    with the elapsed session time filled in.
    """

    def __init__(
        self,
        program: TrainingProgram,
        week: int,
        day: str,
        items: list[PrescriptionItem],
        *,
        countdown_warning_seconds: int = COUNTDOWN_WARNING_SECONDS,
        clock: Callable[[], str] = _now_iso,
    ) -> None:
        """
        Args:
            program: Program the items were resolved from
            week: Program week being performed
            day: Day name within the week
            items: Resolved prescription for that day
            countdown_warning_seconds: Rest seconds left that count as "warning"
            clock: Returns the ISO timestamp recorded on each set
        """
        self.program = program
        self.week = week
        self.day = day
        # Deltas can drive a set count to zero; such items have nothing to perform.
        self.items = [item for item in items if item.sets > 0]
        if not self.items:
            raise SessionStateError(f"No exercises prescribed for {day} of week {week}")
        self.countdown_warning_seconds = countdown_warning_seconds
        self._clock = clock

        self.exercise_index = 0
        self.set_index = 0
        self.is_resting = False
        self.is_paused = False
        self.is_finished = False
        self.rest_time_left = 0
        self.session_time = 0
        self.exercise_time = 0

        self.log = WorkoutLog(
            program_id=program.id,
            date=clock(),
            week=week,
            day=day,
            exercises=[
                ExerciseLog(name=item.name, sets=[SetLog() for _ in range(item.sets)])
                for item in self.items
            ],
        )
        # Fail early on a dangling exercise name.
        self.program.exercise(self.items[0].name)
        logger.info("Started %s, week %d (%d exercises)", day, week, len(self.items))

    # ------------------------------------------------------------------
    # Current position
    # ------------------------------------------------------------------

    @property
    def current_item(self) -> PrescriptionItem:
        return self.items[self.exercise_index]

    @property
    def current_definition(self) -> ExerciseDefinition:
        return self.program.exercise(self.current_item.name)

    @property
    def is_last_set(self) -> bool:
        return self.set_index >= self.current_item.sets - 1

    @property
    def is_last_exercise(self) -> bool:
        return self.exercise_index >= len(self.items) - 1

    @property
    def is_session_over_time(self) -> bool:
        return self.session_time > self.program.session_limit_seconds

    @property
    def is_exercise_over_time(self) -> bool:
        limit = self.current_definition.time_limit_s
        return bool(limit) and self.exercise_time > limit

    @property
    def countdown_warning(self) -> bool:
        """True in the final seconds of a rest period."""
        return self.is_resting and 0 < self.rest_time_left <= self.countdown_warning_seconds

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _require_active(self) -> None:
        if self.is_finished:
            raise SessionStateError("Workout session is already finished")

    def _advance(self) -> None:
        """Move to the next set, or the next exercise's first set."""
        self.is_resting = False
        self.rest_time_left = 0
        if self.is_last_set:
            self.exercise_index += 1
            self.set_index = 0
        else:
            self.set_index += 1
        logger.debug("Now at exercise %d, set %d", self.exercise_index, self.set_index)

    def tick(self, seconds: int = 1) -> None:
        """Advance the session clocks by ``seconds`` of real time."""
        self._require_active()
        for _ in range(seconds):
            if self.is_paused:
                return
            self.session_time += 1
            if not self.is_resting:
                self.exercise_time += 1
                continue
            self.rest_time_left -= 1
            if self.rest_time_left <= 0:
                logger.info("Rest over")
                self._advance()

    def pause(self) -> None:
        self._require_active()
        self.is_paused = True

    def resume(self) -> None:
        self._require_active()
        self.is_paused = False

    def complete_set(
        self,
        value: float | None = None,
        weight_kg: float | None = None,
        distance_m: float | None = None,
    ) -> None:
        """
        Record the current set and start resting, or finish the workout.

        Args:
            value: Performed reps or seconds (default: the item's target)
            weight_kg: Load used; stored only when positive
            distance_m: Distance covered; stored only when positive

        Raises:
            SessionStateError: If resting or finished
        """
        self._require_active()
        if self.is_resting:
            raise SessionStateError("Cannot complete a set while resting; skip the rest first")

        item = self.current_item
        definition = self.current_definition
        if value is None:
            value = item.target_value
        if weight_kg is None:
            weight_kg = item.weight_kg
        if distance_m is None:
            distance_m = item.distance_m

        self.log.exercises[self.exercise_index].sets[self.set_index] = SetLog(
            completed=True,
            value=value,
            timestamp=self._clock(),
            weight_kg=weight_kg if weight_kg and weight_kg > 0 else None,
            distance_m=distance_m if distance_m and distance_m > 0 else None,
        )
        logger.info("%s set %d/%d: %s", item.name, self.set_index + 1, item.sets, value)

        if self.is_last_set and self.is_last_exercise:
            self.finish(completed=True)
            return

        self.is_resting = True
        self.rest_time_left = definition.rest_s
        self.exercise_time = 0
        if self.rest_time_left <= 0:
            self._advance()

    def skip_rest(self) -> None:
        """End the current rest immediately."""
        self._require_active()
        if not self.is_resting:
            raise SessionStateError("Not resting")
        self._advance()

    def finish(self, completed: bool = False) -> WorkoutLog:
        """Stop the session and return its log."""
        if not self.is_finished:
            self.is_finished = True
            self.log.total_duration_seconds = self.session_time
            self.log.completed = completed
            logger.info(
                "Finished %s, week %d in %ds (completed=%s)",
                self.day, self.week, self.session_time, completed,
            )
        return self.log
