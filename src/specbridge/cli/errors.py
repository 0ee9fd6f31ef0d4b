"""
Standardized error handling and exit codes for the SpecBridge CLI.

Every command reports failures through ``print_error`` so the problem,
its cause and the fix are always laid out the same way.
"""

from enum import IntEnum

from rich.console import Console

from specbridge.core.config import DEFAULT_CONFIG_FILE
from specbridge.core.errors import (
    AdapterError,
    AuthenticationError,
    ConfigNotFoundError,
    ConfigParseError,
    RateLimitError,
    SpecBridgeError,
)

console = Console()


class ExitCode(IntEnum):
    """Standard exit codes for SpecBridge CLI operations."""

    SUCCESS = 0
    """Operation completed successfully."""

    GENERAL_ERROR = 1
    """Sync failures, unexpected errors and refused operations."""

    USER_ERROR = 2
    """Invalid command-line usage."""


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional command or action to fix it

    Example:
        >>> print_error(
        ...     "Configuration file not found",
        ...     solution="specbridge init",
        ... )
    """
    console.print(f"[red]Error:[/red] {problem}")

    if reason:
        console.print(f"[dim]{reason}[/dim]")

    if solution:
        console.print(f"[cyan]→ Try:[/cyan] {solution}")


def handle_error(error: Exception) -> ExitCode:
    """
    Print a user-facing message for an error and pick the exit code.

    Args:
        error: The exception that ended the command

    Returns:
        Exit code to terminate with
    """
    if isinstance(error, ConfigNotFoundError):
        print_error(
            str(error),
            reason="SpecBridge needs a configuration file to know where to sync",
            solution="specbridge init",
        )
    elif isinstance(error, ConfigParseError):
        print_error(
            str(error),
            solution=f"Fix {DEFAULT_CONFIG_FILE} or regenerate it with: specbridge init --force",
        )
    elif isinstance(error, AuthenticationError):
        print_error(
            str(error),
            reason="Credentials are missing or were rejected",
            solution="export GITHUB_TOKEN=<token>, or set authMethod: gh-cli and run gh auth login",
        )
    elif isinstance(error, RateLimitError):
        wait = f"{error.retry_after} seconds" if error.retry_after is not None else "a while"
        print_error(str(error), solution=f"Wait {wait} and run the sync again")
    elif isinstance(error, AdapterError):
        print_error(str(error))
    elif isinstance(error, SpecBridgeError):
        print_error(str(error), reason=f"Error code: {error.code}")
    else:
        print_error(f"Unexpected error: {error}")
    return ExitCode.GENERAL_ERROR
