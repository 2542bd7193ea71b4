"""
CLI entry point using Typer.

Provides commands for following a training program:
- import-program: Import a program JSON document
- show-program / library: Inspect the active program
- week: Show the prescription for a program week
- workout / log-workout: Perform or record a workout
- history / delete-log: Review workout logs
- stats: Totals, streak and trend charts
- export / reset: Back up or clear all data
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from . import views
from .app import app
from .commands import analysis, program, sessions  # noqa: F401  (register commands)


def configure_logging(verbose: bool) -> None:
    """Route log records through Rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=views.err_console, show_path=False)],
    )


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Show debug logging"),
    ] = False,
) -> None:
    """
    Training program follower. Run without a command to see this week's plan.
    """
    configure_logging(verbose)

    if ctx.invoked_subcommand is not None:
        return  # a sub-command was given

    ctx.invoke(program.week)


if __name__ == "__main__":
    app()
