"""Shared Typer app object, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config_loader import Settings, load_settings
from ..io.program_store import ProgramStore, get_default_data_dir

# Shared --data-dir option type used across all commands
DataDirOption = Annotated[
    Optional[Path],
    typer.Option("--data-dir", "-p", help="Data directory (default: $FITTRACK_HOME or ~/.fittrack)"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="fittrack",
    help="Follow a week-by-week training program and log your workouts.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_store(data_dir: Path | None) -> ProgramStore:
    """Get the store for the given directory or the default location."""
    if data_dir is None:
        data_dir = get_default_data_dir()
    return ProgramStore(data_dir)


def get_settings(store: ProgramStore) -> Settings:
    """Settings for the store's data directory (bundled defaults + user overrides)."""
    return load_settings(store.data_dir)
