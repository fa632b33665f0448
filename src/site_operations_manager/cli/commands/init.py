"""Init command for creating the siteops configuration file."""

from __future__ import annotations

import structlog
import typer
from rich.console import Console
from rich.panel import Panel

from site_operations_manager.core.config.models import (
    CONFIG_DIR,
    CONFIG_FILE,
    PluginsConfig,
    SystemConfig,
)
from site_operations_manager.integrations.hosting.config import HostingConfig
from site_operations_manager.services.plugins.config import PluginManagerConfig

app = typer.Typer(help="Create the siteops configuration file.")
console = Console()
logger = structlog.get_logger()


def default_config() -> SystemConfig:
    """Build the configuration written by ``siteops init``."""
    plugins = PluginsConfig.model_validate(
        {
            "enabled": ["hosting", "self"],
            "hosting": HostingConfig().model_dump(mode="json"),
            "self": PluginManagerConfig().model_dump(mode="json"),
        }
    )
    return SystemConfig(plugins=plugins)


@app.callback(invoke_without_command=True)
def init(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Overwrite existing configuration.",
    ),
) -> None:
    """Write a default configuration to ~/.config/siteops/config.yaml."""
    if ctx.invoked_subcommand is not None:
        return

    logger.info("Initializing config", path=str(CONFIG_FILE))
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)

    if CONFIG_FILE.exists() and not force:
        console.print(f"[yellow]Configuration already exists at {CONFIG_FILE}[/yellow]")
        console.print("Use --force to overwrite.")
        raise typer.Exit(code=1)

    CONFIG_FILE.write_text(default_config().to_yaml())

    console.print(
        Panel(
            f"[green]Configuration initialized successfully![/green]\n\n"
            f"Configuration created at: {CONFIG_FILE}\n\n"
            f"Next steps:\n"
            f"  1. Run [bold]siteops auth login[/bold] with a machine token\n"
            f"  2. Run [bold]siteops status[/bold] to verify setup",
            title="siteops init",
            border_style="green",
        )
    )

    logger.info("Configuration initialized", config_file=str(CONFIG_FILE))
