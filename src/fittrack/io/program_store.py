"""
JSONL-based storage for programs and workout logs.

Two append-style files live in the data directory:
- programs.jsonl: one imported program per line
- logs.jsonl: one workout log per line

Every record gets an auto-incrementing surrogate ``id`` on save.  The
active program is the most recently saved one.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Callable, TypeVar

from ..core.config import DATA_DIR_ENV, DEFAULT_DATA_DIRNAME, LOGS_FILENAME, PROGRAMS_FILENAME
from ..core.models import TrainingProgram, WorkoutLog
from .serializers import (
    ValidationError,
    dict_to_program,
    dict_to_workout_log,
    parse_program_json,
    program_to_dict,
    to_json_line,
    workout_log_to_dict,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProgramStore:
    """
    Manages imported programs and workout logs stored in JSONL format.

    Writes go through a temporary file and os.replace(), so a failed write
    never leaves a half-written file behind.
    """

    def __init__(self, data_dir: str | Path):
        """
        Initialize the store.

        Args:
            data_dir: Directory holding programs.jsonl and logs.jsonl
        """
        self.data_dir = Path(data_dir)
        self.programs_path = self.data_dir / PROGRAMS_FILENAME
        self.logs_path = self.data_dir / LOGS_FILENAME

    def exists(self) -> bool:
        """Check if the store has been initialised."""
        return self.programs_path.exists() and self.logs_path.exists()

    def init(self) -> None:
        """
        Create the data directory and empty record files if missing.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for path in (self.programs_path, self.logs_path):
            if not path.exists():
                path.touch()

    # ------------------------------------------------------------------
    # Low-level record access
    # ------------------------------------------------------------------

    def _read_records(self, path: Path, convert: Callable[[dict[str, Any]], T]) -> list[T]:
        """
        Read every record of a JSONL file.

        A missing file reads as empty.

        Raises:
            ValidationError: If a line is not valid JSON or not a valid record
        """
        if not path.exists():
            return []

        records: list[T] = []
        with open(path, "r", encoding="utf-8") as f:
            for line_num, line in enumerate(f, 1):
                line = line.strip()
                if not line:
                    continue
                try:
                    records.append(convert(json.loads(line)))
                except (json.JSONDecodeError, ValidationError) as e:
                    raise ValidationError(f"Error parsing line {line_num} in {path}: {e}") from e
        return records

    def _write_lines(self, path: Path, lines: list[str]) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.data_dir, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                for line in lines:
                    f.write(line + "\n")
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    @staticmethod
    def _next_id(existing_ids: list[int | None]) -> int:
        return max((i for i in existing_ids if i is not None), default=0) + 1

    # ------------------------------------------------------------------
    # Programs
    # ------------------------------------------------------------------

    def get_programs(self) -> list[TrainingProgram]:
        """All saved programs in save order."""
        return self._read_records(self.programs_path, dict_to_program)

    def get_active_program(self) -> TrainingProgram | None:
        """
        Return the most recently saved program.

        Returns:
            TrainingProgram, or None if nothing has been imported
        """
        programs = self.get_programs()
        return programs[-1] if programs else None

    def save_program(self, program: TrainingProgram) -> int:
        """
        Append a program and assign it a new id.

        Args:
            program: Program to save (its id is updated in place)

        Returns:
            The assigned id
        """
        programs = self.get_programs()
        program.id = self._next_id([p.id for p in programs])
        programs.append(program)
        self._write_lines(self.programs_path, [to_json_line(program_to_dict(p)) for p in programs])
        logger.info("Saved program %r as id %d", program.program_name, program.id)
        return program.id

    def import_program(self, text: str) -> TrainingProgram:
        """
        Parse, validate and save a program JSON document.

        The import is atomic: if parsing or validation fails nothing is
        written and the active program is unchanged.  Duplicate week
        numbers are accepted with a warning; the resolver uses the first.

        Raises:
            ValidationError: If the document is not a valid program
        """
        program = parse_program_json(text)
        weeks = [entry.week for entry in program.weekly_targets]
        for week in sorted({w for w in weeks if weeks.count(w) > 1}):
            logger.warning(
                "Program %r has more than one entry for week %d; the first one is used",
                program.program_name, week,
            )
        program.id = None
        self.save_program(program)
        return program

    # ------------------------------------------------------------------
    # Workout logs
    # ------------------------------------------------------------------

    def get_workout_logs(self) -> list[WorkoutLog]:
        """All workout logs in save order."""
        return self._read_records(self.logs_path, dict_to_workout_log)

    def save_workout_log(self, log: WorkoutLog) -> int:
        """
        Append a workout log and assign it a new id.

        Returns:
            The assigned id
        """
        logs = self.get_workout_logs()
        log.id = self._next_id([entry.id for entry in logs])
        logs.append(log)
        self._write_lines(self.logs_path, [to_json_line(workout_log_to_dict(entry)) for entry in logs])
        logger.info("Saved workout log %d (%s, week %d)", log.id, log.day, log.week)
        return log.id

    def delete_workout_log(self, log_id: int) -> WorkoutLog:
        """
        Delete the workout log with the given id.

        Raises:
            KeyError: If no log has that id
        """
        logs = self.get_workout_logs()
        for i, entry in enumerate(logs):
            if entry.id == log_id:
                del logs[i]
                self._write_lines(
                    self.logs_path, [to_json_line(workout_log_to_dict(e)) for e in logs]
                )
                logger.info("Deleted workout log %d", log_id)
                return entry
        raise KeyError(f"No workout log with id {log_id}")

    # ------------------------------------------------------------------
    # Whole-store operations
    # ------------------------------------------------------------------

    def clear_all_data(self) -> None:
        """
        Delete all programs and workout logs (dangerous - use with caution).
        """
        for path in (self.programs_path, self.logs_path):
            if path.exists():
                path.write_text("")
        logger.info("Cleared all data in %s", self.data_dir)

    def export_backup(self) -> dict[str, Any]:
        """Return the active program and all logs as one JSON-compatible dict."""
        program = self.get_active_program()
        return {
            "program": program_to_dict(program) if program is not None else None,
            "logs": [workout_log_to_dict(log) for log in self.get_workout_logs()],
        }


def get_default_data_dir() -> Path:
    """
    Get the default data directory.

    ``$FITTRACK_HOME`` wins when set; otherwise ``~/.fittrack``.
    """
    env = os.environ.get(DATA_DIR_ENV)
    if env:
        return Path(env).expanduser()
    return Path.home() / DEFAULT_DATA_DIRNAME
