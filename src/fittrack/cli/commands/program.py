"""Program commands: import-program, show-program, week, library, export, reset."""

import json
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer

from ...core.errors import ProgramError
from ...core.prescription import current_week, match_day, resolve_prescription
from ...io.program_store import ProgramStore
from ...io.serializers import ValidationError, prescription_item_to_dict, program_to_dict
from .. import views
from ..app import DataDirOption, JsonOption, app, get_settings, get_store


def load_active_program(store: ProgramStore):
    """Return the active program, or print an error and exit when there is none."""
    try:
        program = store.get_active_program()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    if program is None:
        views.print_error("No program imported yet.")
        views.print_info("Run 'fittrack import-program PROGRAM.json' first.")
        raise typer.Exit(1)
    return program


def resolve_current_week(store: ProgramStore, program) -> int:
    """Week implied by the number of logged workouts."""
    try:
        logs = store.get_workout_logs()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    return current_week(program, len(logs), get_settings(store).sessions_per_week)


@app.command("import-program")
def import_program(
    source: Annotated[
        str,
        typer.Argument(help="Program JSON file, or '-' to read from stdin"),
    ],
    data_dir: DataDirOption = None,
) -> None:
    """
    Import a training program from JSON.

    The new program becomes the active one.  An invalid document leaves the
    current program untouched.
    """
    store = get_store(data_dir)

    if source == "-":
        text = sys.stdin.read()
    else:
        path = Path(source)
        if not path.exists():
            views.print_error(f"File not found: {path}")
            raise typer.Exit(1)
        text = path.read_text(encoding="utf-8")

    store.init()
    try:
        program = store.import_program(text)
    except ValidationError as e:
        views.print_error(f"Invalid program format. {e}")
        raise typer.Exit(1)

    views.print_success(
        f"Imported '{program.program_name}' ({program.duration_weeks} weeks, "
        f"{len(program.exercise_library)} exercises) as program #{program.id}"
    )


@app.command("show-program")
def show_program(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the active program.
    """
    store = get_store(data_dir)
    program = load_active_program(store)

    if json_out:
        print(json.dumps(program_to_dict(program), indent=2))
        return

    try:
        logged = len(store.get_workout_logs())
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    week = current_week(program, logged, get_settings(store).sessions_per_week)
    views.console.print()
    views.console.print(views.format_program_summary(program, logged, week))
    views.console.print()


@app.command()
def week(
    week_number: Annotated[
        Optional[int],
        typer.Option("--week", "-w", help="Program week (default: current week)", min=1),
    ] = None,
    day: Annotated[
        Optional[str],
        typer.Option("--day", "-d", help="Only show this day, e.g. monday"),
    ] = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the exercises prescribed for a program week.
    """
    store = get_store(data_dir)
    program = load_active_program(store)
    if week_number is None:
        week_number = resolve_current_week(store, program)

    try:
        prescription = resolve_prescription(program, week_number)
    except ProgramError as e:
        views.print_error(f"Program data is corrupt: {e}")
        raise typer.Exit(1)

    if day is not None:
        key = match_day(prescription, day)
        if key is None:
            views.print_error(f"No '{day}' in week {week_number}. Days: {', '.join(prescription) or '-'}")
            raise typer.Exit(1)
        prescription = {key: prescription[key]}

    if json_out:
        print(json.dumps({
            "week": week_number,
            "days": {
                d: [prescription_item_to_dict(item) for item in items]
                for d, items in prescription.items()
            },
        }, indent=2))
        return

    views.console.print()
    views.print_week(program, week_number, prescription)
    views.console.print()


@app.command()
def library(
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the active program's exercise library.
    """
    store = get_store(data_dir)
    program = load_active_program(store)

    if json_out:
        print(json.dumps(program_to_dict(program)["exercise_library"], indent=2))
        return

    views.console.print(views.format_library_table(program))


@app.command()
def export(
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Write the backup here instead of stdout"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """
    Export the active program and all workout logs as JSON.
    """
    store = get_store(data_dir)
    try:
        backup = store.export_backup()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    text = json.dumps(backup, indent=2)
    if output is None:
        print(text)
        return
    output.write_text(text + "\n", encoding="utf-8")
    views.print_success(f"Backup written to {output}")


@app.command()
def reset(
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Skip confirmation prompt"),
    ] = False,
    data_dir: DataDirOption = None,
) -> None:
    """
    Permanently delete all programs and workout history.
    """
    store = get_store(data_dir)

    if not force and not views.confirm_action(
        "This deletes all training programs and workout history. Continue?"
    ):
        views.print_info("Cancelled.")
        raise typer.Exit(0)

    try:
        store.clear_all_data()
    except OSError as e:
        views.print_error(f"Failed to clear data: {e}")
        raise typer.Exit(1)

    views.print_success("All data cleared.")
