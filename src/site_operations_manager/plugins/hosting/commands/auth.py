"""CLI commands for authenticating with the hosting platform."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Annotated

import typer
from pydantic import SecretStr
from rich.markup import escape
from rich.prompt import Prompt

from site_operations_manager.integrations.hosting.client import HostingClient
from site_operations_manager.integrations.hosting.config import HostingSession
from site_operations_manager.integrations.hosting.exceptions import HostingError
from site_operations_manager.plugins.hosting.commands.base import console, handle_hosting_error

if TYPE_CHECKING:
    from site_operations_manager.integrations.hosting.config import HostingConfig


def register_auth_commands(
    app: typer.Typer,
    get_config: Callable[[], HostingConfig],
) -> None:
    """Register authentication commands with the root CLI app."""

    auth_app = typer.Typer(
        name="auth",
        help="Log in to and out of the hosting platform",
        no_args_is_help=True,
    )
    app.add_typer(auth_app, name="auth")

    @auth_app.command("login")
    def login(
        machine_token: Annotated[
            str | None,
            typer.Option(
                "--machine-token",
                "-t",
                help="Machine token to log in with (will prompt if not provided)",
            ),
        ] = None,
    ) -> None:
        """Log in with a machine token.

        The resulting session is stored in ~/.config/siteops/session.yaml with
        owner-only permissions.
        """
        if not machine_token:
            machine_token = Prompt.ask("Enter your machine token", password=True)

        if not machine_token:
            console.print("[red]Error:[/red] A machine token is required")
            raise typer.Exit(1)

        try:
            config = get_config()
            with HostingClient(config) as client:
                info = client.authorize_machine_token(machine_token)

            session = HostingSession(
                session=SecretStr(info.session),
                user_id=info.user_id,
                expires_at=info.expires_at,
            )
            path = session.save()

            email = None
            if info.user_id:
                with HostingClient(config, session) as client:
                    email = client.get_user(info.user_id).email

        except HostingError as e:
            handle_hosting_error(e)

        if email:
            console.print(f"[green]Logged in as {escape(email)}.[/green]")
        else:
            console.print("[green]Logged in.[/green]")
        console.print(f"[dim]Session saved to {path}[/dim]")

    @auth_app.command("logout")
    def logout() -> None:
        """Delete the saved session."""
        if HostingSession.delete():
            console.print("[green]Your saved session has been deleted.[/green]")
        else:
            console.print("[yellow]You are not logged in.[/yellow]")

    @auth_app.command("whoami")
    def whoami() -> None:
        """Show the user the current session belongs to."""
        try:
            session = HostingSession.load()
            if session.user_id is None:
                console.print("You are logged in with a session from SITEOPS_SESSION.")
                return
            with HostingClient(get_config(), session) as client:
                user = client.get_user(session.user_id)
        except HostingError as e:
            handle_hosting_error(e)

        console.print(escape(user.email or user.id))
