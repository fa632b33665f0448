"""CLI commands for hosting environments."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import typer
from rich.markup import escape

from site_operations_manager.integrations.hosting.exceptions import HostingError
from site_operations_manager.plugins.hosting.commands.base import (
    SiteEnvArgument,
    console,
    handle_hosting_error,
)

if TYPE_CHECKING:
    from site_operations_manager.integrations.hosting.models import Workflow
    from site_operations_manager.services.hosting.environment_manager import EnvironmentManager


def register_env_commands(
    app: typer.Typer,
    get_manager: Callable[[], EnvironmentManager],
) -> None:
    """Register environment commands with the root CLI app.

    Adds the ``env`` group plus the ``code-rebuild`` shortcut and the hidden
    ``env:code-rebuild`` spelling.
    """

    env_app = typer.Typer(
        name="env",
        help="Environment management commands",
        no_args_is_help=True,
    )
    app.add_typer(env_app, name="env")

    # -----------------------------------------------------------------
    # code-rebuild
    # -----------------------------------------------------------------

    def code_rebuild(site_env: SiteEnvArgument) -> None:
        """Rebuild code for a dev or multidev environment.

        Runs the build steps for the environment's current code and waits for
        the platform workflow to finish. Test and live environments are not
        supported.

        Examples:
            siteops env code-rebuild my-site.dev
            siteops env code-rebuild my-site.feature-x
        """
        try:
            manager = get_manager()
            with console.status(f"Rebuilding code on {escape(site_env)}...") as status:

                def on_poll(workflow: Workflow) -> None:
                    if workflow.active_description:
                        status.update(escape(workflow.active_description))

                workflow = manager.code_rebuild(site_env, on_poll=on_poll)

            console.print(f"[green]{escape(workflow.message)}[/green]")

        except HostingError as e:
            handle_hosting_error(e)

    env_app.command("code-rebuild")(code_rebuild)
    app.command("code-rebuild", hidden=True)(code_rebuild)
    app.command("env:code-rebuild", hidden=True)(code_rebuild)
