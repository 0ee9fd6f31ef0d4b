"""
SpecBridge CLI - Main application entry point.

This module sets up the Typer CLI application with all subcommands.
"""

import typer
from rich.console import Console

from specbridge import __version__
from specbridge.cli import init_cmd, status, sync

app = typer.Typer(
    name="specbridge",
    help="Sync markdown specifications to project management platforms",
    no_args_is_help=True,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging for every command",
    ),
) -> None:
    """
    SpecBridge - keep specs and issue trackers in step.

    Reads requirements.md, design.md and tasks.md from your spec
    directories and creates or updates one issue per item.

    Quick Start:
        1. specbridge init      # Write .specbridge.yaml
        2. specbridge sync      # Push specs to the configured targets
        3. specbridge status    # See what has been synced
    """
    ctx.obj = {"verbose": verbose}


app.command(name="init")(init_cmd.main)
app.command(name="sync")(sync.sync)
app.command(name="status")(status.status)


@app.command()
def version() -> None:
    """Show specbridge version and exit."""
    console.print(f"specbridge version {__version__}")
    raise typer.Exit(0)


__all__ = ["app"]
