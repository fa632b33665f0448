"""CLI commands for managing installed siteops plugins.

Plugins are Composer packages; removing one shells out to composer with a
backup of the plugin directories that is restored if any step fails.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.markup import escape

from site_operations_manager.cli.output import Table
from site_operations_manager.services.plugins.exceptions import (
    PluginConfigError,
    PluginError,
    PluginRequirementsError,
    PluginRestoreError,
)
from site_operations_manager.services.plugins.models import UninstallResult, UninstallState

if TYPE_CHECKING:
    from site_operations_manager.services.plugins.lifecycle_manager import (
        PluginLifecycleManager,
    )

console = Console()

USAGE_MESSAGE = "siteops self plugin <uninstall|remove> <project> [project 2] ..."
UNINSTALL_ALIASES = ("remove", "rm", "delete")

ProjectsArgument = Annotated[
    list[str] | None,
    typer.Argument(
        help="Plugin project names (e.g., example-plugin or vendor/example-plugin)",
        show_default=False,
    ),
]


# =============================================================================
# Error Handling
# =============================================================================


def handle_plugin_error(error: PluginError) -> None:
    """Handle plugin management errors with user-friendly output.

    Raises:
        typer.Exit: Always exits with code 1.
    """
    if isinstance(error, PluginRequirementsError):
        console.print(f"[red]Error:[/red] {escape(error.message)}")
        if error.details:
            console.print(f"  {escape(error.details)}")

    elif isinstance(error, PluginConfigError):
        console.print(f"[red]Error:[/red] {escape(error.message)}")
        if error.details:
            console.print(f"  [dim]{escape(error.details)}[/dim]")
        console.print(
            "\n[dim]Hint: Check plugins.self in your config file and the "
            "SITEOPS_*_DIR environment variables.[/dim]"
        )

    elif isinstance(error, PluginRestoreError):
        console.print("[red]Error:[/red] Plugin directories could not be restored")
        console.print(f"  {escape(error.message)}")
        if error.details:
            console.print(f"  {escape(error.details)}")
        if error.backups:
            console.print("\n  Backups kept for manual recovery:")
            for backup in error.backups:
                console.print(f"    - {backup}")

    else:
        console.print(f"[red]Error:[/red] {escape(error.message)}")

    raise typer.Exit(1)


def print_uninstall_result(result: UninstallResult) -> None:
    """Print the outcome of removing one plugin."""
    message = escape(result.message)
    if result.succeeded:
        console.print(f"[green]{message}[/green]")
        return

    console.print(f"[red]Error:[/red] {message}")
    if result.state is UninstallState.ROLLED_BACK:
        if result.exit_code is not None:
            console.print(f"  Composer exited with code {result.exit_code}")
        console.print("  [dim]Plugin directories were restored from backup.[/dim]")
    for backup in result.backups:
        console.print(f"  [dim]Backup kept at {backup}[/dim]")


# =============================================================================
# Command registration
# =============================================================================


def register_plugin_commands(
    app: typer.Typer,
    get_manager: Callable[[], PluginLifecycleManager],
) -> None:
    """Register the ``self`` group and its ``plugin`` commands.

    The colon spellings (``self:plugin:uninstall`` and friends) are added to
    ``app`` as hidden commands.
    """
    self_app = typer.Typer(
        name="self",
        help="Manage siteops itself",
        no_args_is_help=True,
    )
    plugin_app = typer.Typer(
        name="plugin",
        help="Manage siteops plugins",
        no_args_is_help=True,
    )
    self_app.add_typer(plugin_app, name="plugin")
    app.add_typer(self_app, name="self")

    # -----------------------------------------------------------------
    # list
    # -----------------------------------------------------------------

    def list_plugins() -> None:
        """List installed plugins."""
        try:
            plugins = get_manager().list_plugins()
        except PluginError as e:
            handle_plugin_error(e)

        if not plugins:
            console.print("[yellow]No plugins installed.[/yellow]")
            return

        table = Table(title="Installed Plugins")
        table.add_column("Project", style="cyan")
        table.add_column("Package")
        table.add_column("Version")
        table.add_column("Description", style="dim")
        for plugin in plugins:
            table.add_row(plugin.project, plugin.name, plugin.version or "-", plugin.description)
        console.print(table)

    # -----------------------------------------------------------------
    # uninstall
    # -----------------------------------------------------------------

    def uninstall(projects: ProjectsArgument = None) -> None:
        """Remove one or more plugins.

        Each plugin is removed in turn. If a composer step fails, the plugin
        and dependency directories are restored and the next plugin is
        processed.

        Examples:
            siteops self plugin uninstall example-plugin
            siteops self plugin rm vendor/one vendor/two
        """
        if not projects:
            console.print("[red]Error:[/red] At least one plugin project is required.")
            console.print(f"Usage: {escape(USAGE_MESSAGE)}")
            raise typer.Exit(1)

        try:
            manager = get_manager()
            manager.check_requirements()
            manager.uninstall_many(projects, on_result=print_uninstall_result)
        except PluginError as e:
            handle_plugin_error(e)

    plugin_app.command("list")(list_plugins)
    plugin_app.command("uninstall")(uninstall)
    for alias in UNINSTALL_ALIASES:
        plugin_app.command(alias, hidden=True)(uninstall)

    app.command("self:plugin:list", hidden=True)(list_plugins)
    for name in ("uninstall", *UNINSTALL_ALIASES):
        app.command(f"self:plugin:{name}", hidden=True)(uninstall)
