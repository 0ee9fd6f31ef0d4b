"""
SpecBridge CLI - Status command.

Reports what has been synced so far without contacting any platform.
"""

import typer
from rich.console import Console
from rich.table import Table

from specbridge.cli.errors import handle_error
from specbridge.core.logging import get_logger, setup_logging
from specbridge.core.sync import SyncStateManager

console = Console()


def status(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="List every synced item",
    ),
) -> None:
    """
    Show current sync status.

    Examples:
        specbridge status       # Synced item count and last run
        specbridge status -v    # Also list item -> platform id mappings
    """
    verbose = verbose or bool(ctx.obj and ctx.obj.get("verbose"))
    setup_logging(verbose)

    try:
        state = SyncStateManager(logger=get_logger(verbose))
        mapping = state.load()
        last_run = state.load_last_run()
    except Exception as e:
        raise typer.Exit(handle_error(e))

    console.print("[bold]SpecBridge Sync Status[/bold]\n")

    if not mapping:
        console.print("No items have been synced yet.")
        console.print("Run [bold]specbridge sync[/bold] to start syncing.")
        return

    console.print(f"[green]✓[/green] Total synced items: {len(mapping)}")

    if verbose:
        table = Table(title="Synced Items")
        table.add_column("Item", style="cyan")
        table.add_column("Platform ID")
        for item_id, sync_id in sorted(mapping.items()):
            table.add_row(item_id, sync_id)
        console.print()
        console.print(table)

    if last_run is not None:
        outcome = "[green]succeeded[/green]" if last_run.success else "[red]had failures[/red]"
        console.print(
            f"\nLast run {last_run.finished_at.strftime('%Y-%m-%d %H:%M:%S')} {outcome}: "
            f"{last_run.created} created, {last_run.updated} updated, {last_run.failed} failed"
        )
        if last_run.targets:
            console.print(f"[dim]Targets: {', '.join(last_run.targets)}[/dim]")

    console.print("\nRun [bold]specbridge sync[/bold] to update synced items.")
