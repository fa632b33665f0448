"""Main CLI entry point using Typer."""

from __future__ import annotations

import structlog
import typer
from rich.console import Console

from site_operations_manager import __version__
from site_operations_manager.cli.commands import init, status
from site_operations_manager.core.config.models import SystemConfig, load_config
from site_operations_manager.core.plugins.manager import PluginManager
from site_operations_manager.logging.config import (
    configure_bootstrap_logging,
    configure_logging,
)

app = typer.Typer(
    name="siteops",
    help="Site Operations CLI for managing hosted sites, environments and plugins.",
    add_completion=True,
    no_args_is_help=True,
)

console = Console()
logger = structlog.get_logger()
plugin_manager = PluginManager()


def _load_system_config() -> SystemConfig:
    """Load the configuration file, falling back to defaults if it is invalid."""
    try:
        return load_config() or SystemConfig()
    except ValueError as e:
        logger.warning("Ignoring invalid configuration", error=str(e))
        return SystemConfig()


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"siteops version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: bool | None = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose output.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode.",
    ),
) -> None:
    """Site Operations CLI - Manage hosted sites and siteops plugins."""
    profile = _load_system_config().default_profile
    configure_logging(
        verbose=verbose,
        debug=debug or profile.debug,
        level=profile.log_level,
    )
    ctx.call_on_close(plugin_manager.cleanup_all)


def register_plugins(target: typer.Typer) -> None:
    """Load enabled plugins and let them add their commands to ``target``."""
    config = _load_system_config()
    plugin_manager.load_enabled(config.plugins.enabled)
    plugin_manager.initialize_all(config.model_dump(mode="json"))
    plugin_manager.register_commands(target)


# Register subcommands
app.add_typer(init.app, name="init")
app.command()(status.status)

configure_bootstrap_logging()
register_plugins(app)


if __name__ == "__main__":
    app()
