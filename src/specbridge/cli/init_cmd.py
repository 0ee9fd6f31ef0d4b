"""
SpecBridge CLI - Init command.

Writes a starter .specbridge.yaml into the current directory.
"""

from pathlib import Path

import typer
from rich.console import Console

from specbridge.cli.errors import ExitCode, print_error
from specbridge.core.config import DEFAULT_CONFIG, DEFAULT_CONFIG_FILE
from specbridge.core.sync.state import STATE_DIR

console = Console()


def _print_gitignore_advice(project_dir: Path) -> None:
    gitignore = project_dir / ".gitignore"
    entry = f"{STATE_DIR}/"
    if gitignore.exists():
        if entry not in gitignore.read_text(encoding="utf-8", errors="replace"):
            console.print(f"[dim]Add {entry} to .gitignore to exclude sync state:[/dim]")
            console.print(f'  echo "{entry}" >> .gitignore')
    else:
        console.print("[dim]Create .gitignore and add:[/dim]")
        console.print(f"  {entry}")


def main(
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration",
    ),
) -> None:
    """
    Initialize SpecBridge configuration.

    Examples:
        specbridge init           # Create .specbridge.yaml
        specbridge init --force   # Replace an existing configuration
    """
    project_dir = Path.cwd()
    config_path = project_dir / DEFAULT_CONFIG_FILE

    if config_path.exists():
        if not force:
            console.print(f"[yellow]⚠[/yellow]  {DEFAULT_CONFIG_FILE} already exists.")
            console.print("Use [bold]--force[/bold] to overwrite.")
            raise typer.Exit(ExitCode.GENERAL_ERROR)
        console.print("[blue]Overwriting existing configuration...[/blue]")

    try:
        config_path.write_text(DEFAULT_CONFIG, encoding="utf-8")
    except OSError as e:
        print_error(f"Failed to write {DEFAULT_CONFIG_FILE}", reason=str(e))
        raise typer.Exit(ExitCode.GENERAL_ERROR)

    console.print(f"[green]✓[/green] Configuration file created: {DEFAULT_CONFIG_FILE}")
    _print_gitignore_advice(project_dir)

    console.print("\n[bold]Next steps:[/bold]")
    console.print(f"  1. Edit {DEFAULT_CONFIG_FILE} to configure your targets")
    console.print("  2. Set environment variables (e.g., GITHUB_TOKEN)")
    console.print("  3. Run: specbridge sync")
