"""Analysis commands: stats."""

import json
from datetime import date
from typing import Annotated, Optional

import typer

from ...core.metrics import (
    average_duration_minutes,
    current_streak,
    duration_series,
    exercise_names,
    exercise_progress,
    total_minutes,
    volume_trend,
)
from ...io.serializers import ValidationError
from .. import views
from ..app import DataDirOption, JsonOption, app, get_settings, get_store


@app.command()
def stats(
    exercise: Annotated[
        Optional[str],
        typer.Option("--exercise", "-e", help="Also chart progress for this exercise"),
    ] = None,
    data_dir: DataDirOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show workout statistics: totals, streak, duration and volume trends.
    """
    store = get_store(data_dir)
    settings = get_settings(store)
    try:
        logs = store.get_workout_logs()
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if exercise is not None and exercise not in exercise_names(logs):
        known = ", ".join(exercise_names(logs)) or "-"
        views.print_error(f"No logged sets for '{exercise}'. Logged exercises: {known}")
        raise typer.Exit(1)

    durations = duration_series(logs, settings.duration_chart_sessions)
    volumes = volume_trend(logs, settings.volume_trend_sessions)
    progress = exercise_progress(logs, exercise) if exercise is not None else None

    if json_out:
        out = {
            "total_workouts": len(logs),
            "total_minutes": total_minutes(logs),
            "average_duration_minutes": average_duration_minutes(logs),
            "current_streak_days": current_streak(logs, date.today()),
            "durations": [{"date": d, "minutes": m} for d, m in durations],
            "volume_trend": volumes,
        }
        if progress is not None:
            out["progress"] = [
                {"date": p.date, "avg_value": p.avg_value, "max_weight_kg": p.max_weight_kg}
                for p in progress
            ]
        print(json.dumps(out, indent=2))
        return

    views.console.print()
    views.print_stats(logs, durations, volumes, progress, exercise)
    views.console.print()
