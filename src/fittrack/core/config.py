"""
Configuration constants for fittrack.

Defaults for everything that settings.yaml can override live here, so the
application runs even when no YAML file is readable.
"""

from typing import Final

# =============================================================================
# STORAGE
# =============================================================================

DATA_DIR_ENV: Final[str] = "FITTRACK_HOME"
DEFAULT_DATA_DIRNAME: Final[str] = ".fittrack"
PROGRAMS_FILENAME: Final[str] = "programs.jsonl"
LOGS_FILENAME: Final[str] = "logs.jsonl"
SETTINGS_FILENAME: Final[str] = "settings.yaml"

# =============================================================================
# WORKOUT SESSION
# =============================================================================

COUNTDOWN_WARNING_SECONDS: Final[int] = 3  # Rest seconds left that trigger the warning cue
SESSIONS_PER_WEEK: Final[int] = 3  # Logged workouts that make up one program week

# =============================================================================
# HISTORY & CHARTS
# =============================================================================

HISTORY_LIMIT: Final[int] = 20  # Rows shown by `history` unless --all
DURATION_CHART_SESSIONS: Final[int] = 7  # "Workout duration (last 7)"
VOLUME_TREND_SESSIONS: Final[int] = 10  # "Volume trend" over the last 10 workouts
