"""
ASCII charts for workout history.

Every chart is a list of (label, value) rows drawn as horizontal bars
scaled to the largest value, with the value and its unit after the bar.
"""

from .metrics import ProgressPoint

BAR_WIDTH = 30
EMPTY_HISTORY = "No workouts logged yet."


def _bar_rows(title: str, rows: list[tuple[str, float]], unit: str = "") -> str:
    peak = max((value for _, value in rows), default=0)
    label_width = max((len(label) for label, _ in rows), default=0)

    lines = [title, "=" * len(title)]
    for label, value in rows:
        filled = round(value / peak * BAR_WIDTH) if peak > 0 else 0
        bar = ("#" * filled).ljust(BAR_WIDTH, ".")
        lines.append(f"{label.ljust(label_width)}  {bar}  {value:g}{unit}")
    return "\n".join(lines)


def create_duration_chart(series: list[tuple[str, int]]) -> str:
    """Minutes per workout, oldest first, labelled by date."""
    if not series:
        return EMPTY_HISTORY
    return _bar_rows(f"Duration, last {len(series)} workouts", series, " min")


def create_volume_chart(volumes: list[int]) -> str:
    """Completed sets per workout, oldest first."""
    if not volumes:
        return EMPTY_HISTORY
    rows = [(f"#{i}", v) for i, v in enumerate(volumes, 1)]
    return _bar_rows(f"Completed sets, last {len(volumes)} workouts", rows, " sets")


def create_progress_chart(points: list[ProgressPoint], exercise_name: str) -> str:
    """Average set value per workout for one exercise, plus the top load if any was logged."""
    if not points:
        return f"No logged sets for {exercise_name}."
    chart = _bar_rows(
        f"{exercise_name}: average per set",
        [(p.date, p.avg_value) for p in points],
    )
    if any(p.max_weight_kg > 0 for p in points):
        chart += "\n\n" + _bar_rows(
            f"{exercise_name}: heaviest set",
            [(p.date, p.max_weight_kg) for p in points],
            " kg",
        )
    return chart
