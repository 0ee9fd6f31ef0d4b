"""
SpecBridge CLI - Sync command.

Loads .specbridge.yaml, parses the specs once and pushes them to every
enabled target, then records the correlation ids and a last-run summary
under .specbridge/.
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from specbridge.adapters.source import get_source
from specbridge.adapters.target import TargetAdapter, create_target
from specbridge.cli.errors import ExitCode, handle_error, print_error
from specbridge.core.config import SpecBridgeConfig, load_config
from specbridge.core.logging import get_logger, setup_logging
from specbridge.core.models import SyncResult, merge_results
from specbridge.core.sync import RunRecord, SyncEngine, SyncOptions, SyncScope, SyncStateManager

console = Console()


def build_targets(config: SpecBridgeConfig, logger: logging.Logger) -> list[TargetAdapter]:
    """
    Instantiate adapters for every enabled target.

    Raises:
        ValueError: If no target is enabled or a target type is unknown
    """
    targets: list[TargetAdapter] = []
    for target_config in config.targets:
        if not target_config.enabled:
            logger.debug("Skipping disabled target: %s", target_config.name)
            continue
        targets.append(create_target(target_config, logger=logger))

    if not targets:
        raise ValueError("No enabled target adapters found")
    return targets


def resolve_spec_path(config: SpecBridgeConfig, path: Path | None) -> Path:
    """The --path option wins, then source.path from the config, then the cwd."""
    if path is not None:
        return path
    if config.source.path:
        return Path(config.source.path)
    return Path.cwd()


def record_state(
    state: SyncStateManager,
    results: list[SyncResult],
    options: SyncOptions,
    target_names: list[str],
) -> None:
    """Store the remote id of every created or updated item and the run summary."""
    state.load()
    for result in results:
        for change in result.changes:
            if change.action in ("created", "updated"):
                state.set_sync_id(change.item_id, change.remote_id or change.item_id)
    state.save()

    totals = merge_results(results)
    state.save_last_run(
        RunRecord(
            scope=options.scope.value if options.scope else None,
            dry_run=options.dry_run,
            created=totals.created,
            updated=totals.updated,
            failed=totals.failed,
            targets=target_names,
            errors=totals.errors,
        )
    )


def print_results(results: list[SyncResult], verbose: bool) -> None:
    table = Table(title="Sync Results")
    table.add_column("Target", style="cyan")
    table.add_column("Kind")
    table.add_column("Created", justify="right", style="green")
    table.add_column("Updated", justify="right", style="blue")
    table.add_column("Failed", justify="right", style="red")

    for result in results:
        table.add_row(
            result.target or "-",
            result.kind or "-",
            str(result.created),
            str(result.updated),
            str(result.failed),
        )
    console.print(table)

    for result in results:
        for error in result.errors:
            console.print(f"[yellow]⚠[/yellow]  {result.target or 'target'}: {error}")
        if verbose:
            for change in result.changes:
                console.print(f"[dim]  {change.action}: {change.item_type} {change.item_id}[/dim]")

    totals = merge_results(results)
    console.print(
        f"\n[bold]Summary:[/bold] {totals.created} created, "
        f"{totals.updated} updated, {totals.failed} failed"
    )


def sync(
    ctx: typer.Context,
    scope: SyncScope = typer.Option(
        SyncScope.ALL,
        "--scope",
        "-s",
        help="What to sync: all, requirements, tasks or single",
        case_sensitive=False,
    ),
    item_id: str | None = typer.Option(
        None,
        "--id",
        help="Item ID when --scope is single",
    ),
    dry_run: bool = typer.Option(
        False,
        "--dry-run",
        help="Show what would be synced without touching any target",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging and every change",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to the configuration file (default: ./.specbridge.yaml)",
    ),
    path: Path | None = typer.Option(
        None,
        "--path",
        "-p",
        help="Spec path to parse (default: source.path from the config)",
    ),
) -> None:
    """
    Sync specifications to project management platforms.

    Examples:
        specbridge sync                          # Sync everything
        specbridge sync --scope tasks            # Tasks only
        specbridge sync --scope single --id 1.2  # One item
        specbridge sync --dry-run                # Preview without changes
    """
    if scope == SyncScope.SINGLE and not item_id:
        print_error(
            "--scope single requires --id",
            solution="specbridge sync --scope single --id 1.2",
        )
        raise typer.Exit(ExitCode.USER_ERROR)

    verbose = verbose or bool(ctx.obj and ctx.obj.get("verbose"))
    setup_logging(verbose)
    logger = get_logger(verbose)

    try:
        config = load_config(config_path)
        source = get_source(config.source.type, logger=logger)
        targets = build_targets(config, logger)
        options = SyncOptions(
            scope=scope,
            item_id=item_id,
            dry_run=dry_run,
            path=resolve_spec_path(config, path),
        )

        if dry_run:
            console.print("[yellow]Dry run:[/yellow] no changes will be made")

        engine = SyncEngine(logger=logger)
        with console.status("Syncing specifications..."):
            results = engine.sync(source, targets, options)

        print_results(results, verbose)

        if not dry_run:
            record_state(
                SyncStateManager(logger=logger),
                results,
                options,
                [target.name for target in targets],
            )
    except Exception as e:
        raise typer.Exit(handle_error(e))

    if merge_results(results).failed > 0:
        raise typer.Exit(ExitCode.GENERAL_ERROR)
    console.print("[green]✓[/green] Sync completed")
