"""Status command for showing CLI configuration and readiness."""

from __future__ import annotations

import platform
import shutil

import structlog
import typer
from rich.console import Console
from rich.markup import escape

from site_operations_manager import __version__
from site_operations_manager.cli.output import Table
from site_operations_manager.core.config.models import CONFIG_FILE, SystemConfig, load_config
from site_operations_manager.core.plugins.manager import PluginManager
from site_operations_manager.integrations.composer.client import ComposerClient, ComposerError
from site_operations_manager.integrations.hosting.config import HostingConfig, HostingSession
from site_operations_manager.integrations.hosting.exceptions import HostingConfigError
from site_operations_manager.services.plugins.config import PluginManagerConfig
from site_operations_manager.services.plugins.exceptions import PluginConfigError

console = Console()
logger = structlog.get_logger()


def _ok(flag: bool, yes: str = "yes", no: str = "no") -> str:
    return f"[green]{yes}[/green]" if flag else f"[yellow]{no}[/yellow]"


def _composer_version(binary: str) -> str | None:
    try:
        return ComposerClient(binary_path=binary).get_version()
    except ComposerError as e:
        logger.debug("Composer version unavailable", binary=binary, error=e.message)
        return None


def status(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show detailed status information.",
    ),
) -> None:
    """Show siteops configuration, session and plugin directory status."""
    logger.info("Checking status", verbose=verbose)

    try:
        config = load_config() or SystemConfig()
    except ValueError as e:
        console.print(f"[red]Error:[/red] Invalid configuration in {CONFIG_FILE}")
        console.print(f"  {e}")
        raise typer.Exit(1) from None

    try:
        hosting = HostingConfig.from_env(config.plugin_config("hosting"))
        plugin_dirs = PluginManagerConfig.from_env(config.plugin_config("self"))
    except (HostingConfigError, PluginConfigError) as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        if e.details:
            console.print(f"  [dim]{escape(e.details)}[/dim]")
        raise typer.Exit(1) from None
    composer = plugin_dirs.composer_binary or shutil.which("composer")

    table = Table(title="Site Operations Status")
    table.add_column("Component", style="cyan", no_wrap=True)
    table.add_column("Status")
    table.add_column("Details", style="dim")

    table.add_row("CLI Version", __version__, "siteops")
    table.add_row("Configuration", _ok(CONFIG_FILE.exists(), "found", "missing"), str(CONFIG_FILE))
    table.add_row("API", hosting.base_url, f"timeout {hosting.timeout:g}s")
    table.add_row(
        "Session",
        _ok(HostingSession.exists(), "logged in", "not logged in"),
        str(HostingSession.get_session_path()),
    )
    composer_details = "-"
    if composer:
        version = _composer_version(composer)
        composer_details = f"{composer} ({version})" if version else composer
    table.add_row("Composer", _ok(composer is not None, "found", "missing"), composer_details)
    table.add_row(
        "Plugins dir",
        _ok(plugin_dirs.plugins_dir.is_dir(), "present", "missing"),
        str(plugin_dirs.plugins_dir),
    )
    table.add_row(
        "Dependencies dir",
        _ok(plugin_dirs.dependencies_dir.is_dir(), "present", "missing"),
        str(plugin_dirs.dependencies_dir),
    )

    if verbose:
        table.add_row("Python", platform.python_version(), platform.python_implementation())
        table.add_row("Platform", platform.system(), platform.release())
        table.add_row("Backups dir", str(plugin_dirs.backups_dir), "")
        table.add_row(
            "Workflow polling",
            f"every {hosting.poll_interval:g}s",
            f"timeout {hosting.workflow_timeout:g}s",
        )
        table.add_row("Enabled plugins", ", ".join(config.plugins.enabled) or "-", "")
        available = PluginManager().discover_plugins()
        table.add_row("Available plugins", ", ".join(available) or "-", "")

    console.print(table)

    if not CONFIG_FILE.exists():
        console.print(
            "\n[yellow]No configuration found.[/yellow] "
            "Run [bold]siteops init[/bold] to create one."
        )

    logger.info("Status check complete")
