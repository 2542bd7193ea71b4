"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of programs, prescriptions and
workout history.
"""

from datetime import date

from rich.console import Console
from rich.table import Table

from ..core.ascii_plot import create_duration_chart, create_progress_chart, create_volume_chart
from ..core.metrics import (
    ProgressPoint,
    average_duration_minutes,
    completed_sets,
    current_streak,
    total_minutes,
)
from ..core.models import DayPrescription, PrescriptionItem, TrainingProgram, WorkoutLog
from ..core.prescription import format_seconds, format_target

console = Console()
err_console = Console(stderr=True)


def format_item(item: PrescriptionItem) -> str:
    """One-line prescription, e.g. "3 × 30s" or "4 × 8 (each) @ 10.0 kg"."""
    text = f"{item.sets} × {format_target(item)}"
    if item.weight_kg:
        text += f" @ {item.weight_kg:g} kg"
    if item.distance_m:
        text += f" · {item.distance_m:g} m"
    return text


def format_week_table(program: TrainingProgram, week: int, prescription: DayPrescription) -> Table:
    """
    Create a Rich table with every day's exercises for one week.

    Args:
        program: Program the prescription was resolved from
        week: Week number shown in the title
        prescription: Resolved day → items mapping

    Returns:
        Rich Table object
    """
    table = Table(title=f"{program.program_name} · Week {week} of {program.duration_weeks}")

    table.add_column("Day", style="cyan")
    table.add_column("Exercise", style="bold")
    table.add_column("Target", justify="right")
    table.add_column("Rest", justify="right", style="dim")

    for day, items in prescription.items():
        for i, item in enumerate(items):
            definition = program.exercise_library.get(item.name)
            rest = f"{definition.rest_s}s" if definition is not None else "?"
            table.add_row(day.capitalize() if i == 0 else "", item.name, format_item(item), rest)
        table.add_section()

    return table


def print_week(program: TrainingProgram, week: int, prescription: DayPrescription) -> None:
    """Print a resolved week, or a notice when it has no training days."""
    if not prescription:
        console.print(f"[yellow]No prescription for week {week}.[/yellow]")
        return
    console.print(format_week_table(program, week, prescription))


def format_program_summary(program: TrainingProgram, workouts_logged: int, week: int) -> str:
    """Format the active program as a text block."""
    lines = [
        f"[bold]{program.program_name}[/bold]  (id {program.id})",
        f"- Duration: {program.duration_weeks} weeks",
        f"- Current week: {week}",
        f"- Session time budget: {program.session_structure.main_minutes}m",
        f"- Goals: {', '.join(program.goal_priority) or '-'}",
        f"- Exercises: {len(program.exercise_library)}",
        f"- Training days: {', '.join(program.days) or '-'}",
        f"- Week entries: {', '.join(str(w) for w in program.week_numbers()) or '-'}",
        f"- Workouts logged: {workouts_logged}",
    ]
    return "\n".join(lines)


def format_library_table(program: TrainingProgram) -> Table:
    """Rich table of the program's exercise library."""
    table = Table(title="Exercise Library")

    table.add_column("Exercise", style="bold")
    table.add_column("Type", style="magenta")
    table.add_column("Rest", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Description")

    for name, definition in program.exercise_library.items():
        table.add_row(
            name,
            definition.type.replace("_", " "),
            f"{definition.rest_s}s",
            f"{definition.time_limit_s}s" if definition.time_limit_s else "-",
            definition.description or "",
        )

    return table


def format_history_table(logs: list[WorkoutLog]) -> Table:
    """
    Create a Rich table displaying workout history, newest first.

    Args:
        logs: Workout logs to display

    Returns:
        Rich Table object
    """
    table = Table(title="Workout History")

    table.add_column("ID", justify="right", style="dim", width=4)
    table.add_column("Date", style="cyan")
    table.add_column("Week", justify="right")
    table.add_column("Day", style="magenta")
    table.add_column("Duration", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Exercises")
    table.add_column("Done", justify="center")

    for log in reversed(logs):
        exercises = ", ".join(
            f"{ex.name} {len(ex.completed_sets)}/{len(ex.sets)}" for ex in log.exercises
        )
        table.add_row(
            str(log.id) if log.id is not None else "-",
            log.day_key,
            str(log.week),
            log.day,
            format_seconds(log.total_duration_seconds),
            str(completed_sets(log)),
            exercises,
            "✓" if log.completed else "-",
        )

    return table


def print_history(logs: list[WorkoutLog]) -> None:
    """Print workout history to console."""
    if not logs:
        console.print("[yellow]No workouts logged yet.[/yellow]")
        return
    console.print(format_history_table(logs))


def format_stats_display(logs: list[WorkoutLog], today: date | None = None) -> str:
    """Format headline statistics as a text block."""
    lines = [
        "Statistics",
        f"- Total workouts: {len(logs)}",
        f"- Total minutes: {total_minutes(logs)}",
        f"- Avg. duration: {average_duration_minutes(logs)}m",
        f"- Current streak: {current_streak(logs, today)} days",
    ]
    return "\n".join(lines)


def print_stats(
    logs: list[WorkoutLog],
    durations: list[tuple[str, int]],
    volumes: list[int],
    progress: list[ProgressPoint] | None = None,
    exercise_name: str | None = None,
) -> None:
    """Print statistics and history charts."""
    console.print(format_stats_display(logs))
    console.print()
    console.print(create_duration_chart(durations))
    console.print()
    console.print(create_volume_chart(volumes))
    if exercise_name is not None:
        console.print()
        console.print(create_progress_chart(progress or [], exercise_name))


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    response = console.input(f"{message} [y/N]: ")
    return response.lower() in ("y", "yes")
