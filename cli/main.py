#!/usr/bin/env python3
"""
Deferred CLI - HTTP requests on the deferred value engine

Main entrypoint for the deferred command-line tool.
"""

import sys

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import fetch
from deferred.config import TransportConfig
from deferred.logging_config import setup_logging
from deferred.metrics import start_metrics_server

# Initialize Typer app
app = typer.Typer(
    name="deferred",
    help="HTTP requests on the deferred value engine",
    add_completion=False,
)

# Console for rich output
console = Console()

app.command("fetch")(fetch.fetch_command)
app.command("all")(fetch.all_command)
app.command("race")(fetch.race_command)


@app.callback()
def startup():
    """Configure logging and metrics before any command runs."""
    # stdout carries command output
    setup_logging(stream=sys.stderr)

    config = TransportConfig.from_env()
    start_metrics_server(enabled=config.metrics_enabled, port=config.metrics_port)


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from deferred import __version__ as engine_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Deferred CLI[/bold]", f"v{__version__}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
