"""Base utilities for hosting CLI commands.

Provides common Typer arguments and error handling shared by the ``env``
and ``auth`` command groups.
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from site_operations_manager.integrations.hosting.exceptions import (
    HostingAPIError,
    HostingAuthError,
    HostingConfigError,
    HostingConnectionError,
    HostingError,
    HostingNotFoundError,
    HostingValidationError,
    WorkflowFailedError,
    WorkflowTimeoutError,
)

# Shared console instance
console = Console()


# =============================================================================
# Common Typer Argument Annotations
# =============================================================================

SiteEnvArgument = Annotated[
    str,
    typer.Argument(
        help="Site and environment in the form <site>.<env> (e.g., my-site.dev)",
        metavar="SITE.ENV",
    ),
]


# =============================================================================
# Error Handling
# =============================================================================

LOGIN_HINT = "\n[dim]Hint: Run 'siteops auth login --machine-token <token>' to log in.[/dim]"


def handle_hosting_error(error: HostingError) -> None:
    """Handle hosting errors with user-friendly output.

    Args:
        error: The hosting error to handle.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    message = escape(error.message)

    if isinstance(error, HostingConnectionError):
        console.print("[red]Error:[/red] Cannot connect to the hosting API")
        console.print(f"  {message}")
        if error.details:
            console.print(f"  Cause: {escape(error.details)}")
        console.print(
            "\n[dim]Hint: Check your network connection or SITEOPS_API_URL.[/dim]"
        )

    elif isinstance(error, HostingAuthError):
        console.print("[red]Error:[/red] Authentication failed")
        console.print(f"  {message}")
        console.print(LOGIN_HINT)

    elif isinstance(error, HostingConfigError):
        console.print(f"[red]Error:[/red] {message}")
        if error.details:
            console.print(f"  [dim]{escape(error.details)}[/dim]")

    elif isinstance(error, HostingNotFoundError):
        console.print(f"[red]Error:[/red] {message}")

    elif isinstance(error, HostingValidationError):
        console.print(f"[red]Error:[/red] {message}")

    elif isinstance(error, WorkflowTimeoutError):
        console.print("[red]Error:[/red] Workflow timed out")
        console.print(f"  {message}")
        console.print(
            "\n[dim]Hint: The workflow may still finish on the platform. "
            "Raise SITEOPS_WORKFLOW_TIMEOUT to wait longer.[/dim]"
        )

    elif isinstance(error, WorkflowFailedError):
        console.print(f"[red]Error:[/red] {message}")

    elif isinstance(error, HostingAPIError):
        console.print(f"[red]Error:[/red] {message}")
        if error.status_code:
            console.print(f"  HTTP Status: {error.status_code}")

    else:
        console.print(f"[red]Error:[/red] {message}")

    raise typer.Exit(1)
