"""fittrack: replay week-by-week training programs and log workouts."""

__version__ = "0.1.0"
