"""
YAML → settings loader.

Loads the bundled settings.yaml and merges user overrides from
``<data dir>/settings.yaml``.

Usage:
    from fittrack.core.config_loader import load_settings
    settings = load_settings(data_dir)
    warn_at = settings.countdown_warning_seconds

If the bundled YAML cannot be read, the defaults from config.py are used.
If the user override file has parse errors, a warning is logged and the
file is ignored.
"""

from __future__ import annotations

import importlib.resources
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from . import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Resolved application settings."""

    countdown_warning_seconds: int = config.COUNTDOWN_WARNING_SECONDS
    sessions_per_week: int = config.SESSIONS_PER_WEEK
    history_limit: int = config.HISTORY_LIMIT
    duration_chart_sessions: int = config.DURATION_CHART_SESSIONS
    volume_trend_sessions: int = config.VOLUME_TREND_SESSIONS


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; log and return {} if it cannot be read."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring settings file %s: %s", path, exc)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring settings file %s: top level is not a mapping", path)
        return {}
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _int_setting(raw: dict[str, Any], section: str, key: str, default: int) -> int:
    value = (raw.get(section) or {}).get(key, default)
    try:
        value = int(value)
    except (TypeError, ValueError):
        logger.warning("Setting %s.%s=%r is not an integer; using %d", section, key, value, default)
        return default
    if value < 0:
        logger.warning("Setting %s.%s=%d is negative; using %d", section, key, value, default)
        return default
    return value


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_settings_path() -> Path | None:
    """Return the path to the bundled settings.yaml, or None if not found."""
    ref = importlib.resources.files("fittrack").joinpath("settings.yaml")
    if not ref.is_file():
        return None
    with importlib.resources.as_file(ref) as p:
        return p


def get_user_settings_path(data_dir: Path) -> Path | None:
    """Return <data_dir>/settings.yaml if it exists, else None."""
    p = Path(data_dir) / config.SETTINGS_FILENAME
    return p if p.exists() else None


def load_raw_settings(data_dir: Path | None = None) -> dict[str, Any]:
    """
    Load and merge settings from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/fittrack/settings.yaml
    2. User override at <data_dir>/settings.yaml

    Returns:
        Merged dict of settings sections.  Empty dict if no YAML available.
    """
    raw: dict[str, Any] = {}

    bundled = get_bundled_settings_path()
    if bundled is not None:
        raw = _deep_merge(raw, _load_yaml_file(bundled))

    if data_dir is not None:
        user = get_user_settings_path(data_dir)
        if user is not None:
            raw = _deep_merge(raw, _load_yaml_file(user))

    return raw


def load_settings(data_dir: Path | None = None) -> Settings:
    """Return typed Settings, falling back to config.py defaults per key."""
    raw = load_raw_settings(data_dir)
    return Settings(
        countdown_warning_seconds=_int_setting(
            raw, "session", "countdown_warning_seconds", config.COUNTDOWN_WARNING_SECONDS
        ),
        sessions_per_week=max(
            1, _int_setting(raw, "session", "sessions_per_week", config.SESSIONS_PER_WEEK)
        ),
        history_limit=_int_setting(raw, "history", "limit", config.HISTORY_LIMIT),
        duration_chart_sessions=_int_setting(
            raw, "charts", "duration_sessions", config.DURATION_CHART_SESSIONS
        ),
        volume_trend_sessions=_int_setting(
            raw, "charts", "volume_sessions", config.VOLUME_TREND_SESSIONS
        ),
    )
