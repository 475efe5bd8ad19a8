"""Main Typer application — imports and registers all CLI commands.

Entry point: ``chartpack`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from chartpack import __version__
from chartpack.cli.commands.inspect_cmd import inspect_cmd
from chartpack.config import config

app = typer.Typer(
    name="chartpack",
    help="Chartpack: write and inspect chart archives.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


def configure_logging(level: str) -> None:
    """Route ``chartpack`` loggers through a Rich handler on stderr."""
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger("chartpack")
    root.handlers[:] = [handler]
    root.setLevel(level.upper())


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        config.log_level,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
) -> None:
    """Chartpack: write and inspect chart archives."""
    configure_logging(log_level)


# Register subcommands
app.command(name="inspect", help="List the entries of a chart archive.")(inspect_cmd)


@app.command(name="version", help="Show the chartpack version.")
def version_cmd() -> None:
    """Print the installed chartpack version."""
    Console().print(f"chartpack [bold]{__version__}[/bold]")


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
