"""
Tests for YAML settings loading and user overrides.
"""

import tempfile
from pathlib import Path

from fittrack.core import config
from fittrack.core.config_loader import Settings, load_raw_settings, load_settings


class TestBundledSettings:
    def test_bundled_file_loads(self):
        raw = load_raw_settings()

        assert raw["session"]["countdown_warning_seconds"] == config.COUNTDOWN_WARNING_SECONDS
        assert raw["history"]["limit"] == config.HISTORY_LIMIT

    def test_defaults_match_constants(self):
        assert load_settings() == Settings()


class TestUserOverrides:
    """<data dir>/settings.yaml overrides the bundled values."""

    def _write(self, tmpdir: str, text: str) -> Path:
        path = Path(tmpdir)
        (path / config.SETTINGS_FILENAME).write_text(text, encoding="utf-8")
        return path

    def test_partial_override(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            data_dir = self._write(tmpdir, "session:\n  sessions_per_week: 4\n")

            settings = load_settings(data_dir)

        assert settings.sessions_per_week == 4
        assert settings.countdown_warning_seconds == config.COUNTDOWN_WARNING_SECONDS

    def test_missing_override_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            assert load_settings(Path(tmpdir)) == Settings()

    def test_bad_value_falls_back(self, caplog):
        with tempfile.TemporaryDirectory() as tmpdir:
            data_dir = self._write(tmpdir, "history:\n  limit: lots\ncharts:\n  volume_sessions: -2\n")

            with caplog.at_level("WARNING"):
                settings = load_settings(data_dir)

        assert settings.history_limit == config.HISTORY_LIMIT
        assert settings.volume_trend_sessions == config.VOLUME_TREND_SESSIONS
        assert "history.limit" in caplog.text

    def test_sessions_per_week_floor(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            data_dir = self._write(tmpdir, "session:\n  sessions_per_week: 0\n")

            assert load_settings(data_dir).sessions_per_week == 1

    def test_broken_yaml_is_ignored(self, caplog):
        with tempfile.TemporaryDirectory() as tmpdir:
            data_dir = self._write(tmpdir, "session: [unclosed\n")

            with caplog.at_level("WARNING"):
                settings = load_settings(data_dir)

        assert settings == Settings()
        assert "Ignoring settings file" in caplog.text
