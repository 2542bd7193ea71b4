"""Session commands: workout, log-workout, history, delete-log, and helpers."""

import json
import re
import time
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.errors import ProgramError
from ...core.prescription import format_seconds, format_target, match_day, next_day, resolve_prescription
from ...core.session import WorkoutSession
from ...io.serializers import ValidationError, workout_log_to_dict
from .. import views
from ..app import DataDirOption, JsonOption, app, get_settings, get_store
from .program import load_active_program, resolve_current_week

_SET_ENTRY_RE = re.compile(r"^(\d+(?:\.\d+)?)(?:\s*@\s*\+?(\d+(?:\.\d+)?)(?:\s*kg)?)?$", re.IGNORECASE)


def parse_set_entry(raw: str) -> tuple[float, float | None]:
    """
    Parse one performed set.

    Formats:
        12        value only (reps or seconds)
        12@20     value at 20 kg
        12@+20kg  same, with the optional '+' and 'kg'

    Returns:
        (value, weight_kg or None)

    Raises:
        ValidationError: If the entry does not match
    """
    m = _SET_ENTRY_RE.match(raw.strip())
    if not m:
        raise ValidationError(f"Invalid set entry: '{raw}'. Use a number, e.g. 12 or 12@20")
    value = float(m.group(1))
    weight = float(m.group(2)) if m.group(2) is not None else None
    return (int(value) if value.is_integer() else value), weight


def _resolve_day(program, week: int, day: str | None, interactive: bool):
    """Return (day, items) for the requested or default day; exit on error."""
    try:
        prescription = resolve_prescription(program, week)
    except ProgramError as e:
        views.print_error(f"Program data is corrupt: {e}")
        raise typer.Exit(1)

    if not prescription:
        views.print_error(f"No prescription for week {week}.")
        raise typer.Exit(1)

    if day is None:
        day = next_day(prescription)
        if interactive and len(prescription) > 1:
            raw = views.console.input(f"Day ({', '.join(prescription)}) (default {day}): ").strip()
            day = raw or day

    key = match_day(prescription, day)
    if key is None:
        views.print_error(f"No '{day}' in week {week}. Days: {', '.join(prescription)}")
        raise typer.Exit(1)
    return key, prescription[key]


def _start_session(program, week: int, day: str, items, settings, clock=None) -> WorkoutSession:
    kwargs = {"countdown_warning_seconds": settings.countdown_warning_seconds}
    if clock is not None:
        kwargs["clock"] = clock
    try:
        return WorkoutSession(program, week, day, items, **kwargs)
    except ProgramError as e:
        views.print_error(str(e))
        raise typer.Exit(1)


@app.command()
def workout(
    week_number: Annotated[
        Optional[int],
        typer.Option("--week", "-w", help="Program week (default: current week)", min=1),
    ] = None,
    day: Annotated[
        Optional[str],
        typer.Option("--day", "-d", help="Day to train, e.g. monday (default: first day)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Run an interactive workout session.

    For each set enter what you performed (Enter accepts the target, 'q'
    stops early).  Rest periods end when you press Enter.
    """
    store = get_store(data_dir)
    program = load_active_program(store)
    settings = get_settings(store)
    if week_number is None:
        week_number = resolve_current_week(store, program)

    day, items = _resolve_day(program, week_number, day, interactive=True)
    session = _start_session(program, week_number, day, items, settings)

    views.console.print()
    views.console.print(
        f"[bold cyan]{day.capitalize()} · Week {week_number}[/bold cyan]"
        f"  (budget {format_seconds(program.session_limit_seconds)})"
    )

    try:
        _run_interactive(session)
    except ProgramError as e:
        views.print_error(str(e))
        session.finish(completed=False)

    log = session.log
    if session.is_session_over_time:
        views.print_warning("Session went over the program's time budget")

    store.init()
    store.save_workout_log(log)
    status = "Completed" if log.completed else "Stopped"
    views.print_success(
        f"{status} workout #{log.id}: {day}, week {week_number}, "
        f"{format_seconds(log.total_duration_seconds)}"
    )


def _run_interactive(session: WorkoutSession) -> None:
    """Prompt for every set until the session finishes or the user quits."""
    started = time.monotonic()

    def elapse() -> None:
        # Tick in whole seconds of wall time since the session started.
        due = int(time.monotonic() - started) - session.session_time
        if due > 0:
            session.tick(due)

    while not session.is_finished:
        item = session.current_item
        views.console.print()
        views.console.print(
            f"[bold]{item.name}[/bold]  set {session.set_index + 1}/{item.sets}"
            f"  target {format_target(item)}"
        )
        raw = views.console.input(f"  Done [{item.target_value}] (q to stop): ").strip()
        elapse()

        if raw.lower() in ("q", "quit"):
            session.finish(completed=False)
            break

        value, weight = None, None
        if raw:
            try:
                value, weight = parse_set_entry(raw)
            except ValidationError as e:
                views.print_error(str(e))
                continue

        if session.is_exercise_over_time:
            views.print_warning(f"{item.name} went over its {session.current_definition.time_limit_s}s limit")

        session.complete_set(value, weight_kg=weight)

        if session.is_resting:
            views.console.input(
                f"  Rest {session.rest_time_left}s, press Enter to continue "
            )
            elapse()
            if session.is_resting:
                session.skip_rest()


@app.command("log-workout")
def log_workout(
    week_number: Annotated[
        Optional[int],
        typer.Option("--week", "-w", help="Program week (default: current week)", min=1),
    ] = None,
    day: Annotated[
        Optional[str],
        typer.Option("--day", "-d", help="Day trained, e.g. monday (default: first day)"),
    ] = None,
    values: Annotated[
        Optional[str],
        typer.Option(
            "--values", "-v",
            help="Performed sets in order, comma-separated: 12,12,10@20,30 (default: all targets)",
        ),
    ] = None,
    duration_min: Annotated[
        int,
        typer.Option("--duration-min", "-m", help="Session duration in minutes", min=0),
    ] = 0,
    date: Annotated[
        Optional[str],
        typer.Option("--date", help="Workout date (YYYY-MM-DD, default: now)"),
    ] = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Log a workout without the interactive session.

    Fewer values than prescribed sets records a partial workout:

      fittrack log-workout --week 2 --day monday --values "40,40,35" -m 25
    """
    store = get_store(data_dir)
    program = load_active_program(store)
    settings = get_settings(store)
    if week_number is None:
        week_number = resolve_current_week(store, program)

    clock = None
    if date is not None:
        try:
            stamp = datetime.strptime(date, "%Y-%m-%d").isoformat(timespec="seconds")
        except ValueError:
            views.print_error(f"Invalid date: {date}. Expected YYYY-MM-DD")
            raise typer.Exit(1)
        clock = lambda: stamp  # noqa: E731

    day, items = _resolve_day(program, week_number, day, interactive=False)

    entries: list[tuple[float, float | None]] | None = None
    if values is not None:
        try:
            entries = [parse_set_entry(v) for v in values.split(",") if v.strip()]
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)

    session = _start_session(program, week_number, day, items, settings, clock)
    session.tick(duration_min * 60)

    try:
        if entries is None:
            while not session.is_finished:
                session.complete_set()
                if session.is_resting:
                    session.skip_rest()
        else:
            for value, weight in entries:
                if session.is_finished:
                    views.print_warning("More values than prescribed sets; extra values ignored")
                    break
                session.complete_set(value, weight_kg=weight)
                if session.is_resting:
                    session.skip_rest()
    except ProgramError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    log = session.finish(completed=False) if not session.is_finished else session.log
    store.init()
    store.save_workout_log(log)

    if json_out:
        print(json.dumps(workout_log_to_dict(log), indent=2))
        return
    status = "complete" if log.completed else "partial"
    views.print_success(f"Logged workout #{log.id} ({status}): {day}, week {week_number}")


@app.command()
def history(
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Show every workout, not just the most recent"),
    ] = False,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display workout history (newest first).
    """
    store = get_store(data_dir)
    try:
        logs = store.get_workout_logs()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not show_all:
        limit = get_settings(store).history_limit
        logs = logs[-limit:] if limit else logs

    if json_out:
        print(json.dumps([workout_log_to_dict(log) for log in logs], indent=2))
        return

    views.print_history(logs)


@app.command("delete-log")
def delete_log(
    log_id: Annotated[int, typer.Argument(help="Workout ID as shown by 'history'")],
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Delete a workout log by ID.
    """
    store = get_store(data_dir)
    try:
        logs = store.get_workout_logs()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    target = next((log for log in logs if log.id == log_id), None)
    if target is None:
        views.print_error(f"No workout with ID {log_id}")
        raise typer.Exit(1)

    views.console.print(f"Workout to delete: [bold]{target.day_key}[/bold] ({target.day}, week {target.week})")
    if not force and not views.confirm_action("Delete this workout?"):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    store.delete_workout_log(log_id)
    views.print_success(f"Deleted workout #{log_id}")
