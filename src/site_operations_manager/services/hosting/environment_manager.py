"""Environment operations: site/environment resolution and code rebuilds."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from site_operations_manager.integrations.hosting.exceptions import (
    HostingFrozenSiteError,
    HostingValidationError,
)
from site_operations_manager.services.hosting.base import HostingBaseManager

if TYPE_CHECKING:
    from site_operations_manager.integrations.hosting.client import HostingClient
    from site_operations_manager.integrations.hosting.models import (
        Environment,
        Site,
        Workflow,
    )
    from site_operations_manager.services.hosting.workflow_manager import (
        PollCallback,
        WorkflowManager,
    )

PROTECTED_ENVIRONMENTS = frozenset({"test", "live"})

CODE_REBUILD_WORKFLOW = "sync_code"
CODE_REBUILD_PARAMS: dict[str, Any] = {
    "converge": True,
    "build_steps": {"artifact_install": True},
}

FROZEN_SITE_MESSAGE = (
    "This site is frozen. Its test and live environments and many commands "
    "will be unavailable while it remains frozen."
)
PROTECTED_ENV_MESSAGE = "Test and live are not valid environments for this command."


def parse_site_env(site_env: str) -> tuple[str, str]:
    """Split a ``<site>.<env>`` identifier.

    Raises:
        HostingValidationError: If either part is missing.
    """
    site, sep, env = site_env.strip().partition(".")
    if not sep or not site or not env:
        raise HostingValidationError(
            f"'{site_env}' is not a valid site and environment.",
            details="Expected format `<site>.<env>`, e.g. my-site.dev",
        )
    return site, env


class EnvironmentManager(HostingBaseManager):
    """Resolves sites and environments and runs environment workflows."""

    _entity_name = "environment"

    def __init__(self, client: HostingClient, workflows: WorkflowManager) -> None:
        """Initialize the environment manager.

        Args:
            client: Hosting API client.
            workflows: Manager used to wait for created workflows.
        """
        super().__init__(client)
        self._workflows = workflows

    def get_site(self, name: str) -> Site:
        """Look up a site by name or UUID."""
        return self._client.find_site(name)

    def require_site_not_frozen(self, site: Site) -> None:
        """Raise HostingFrozenSiteError if ``site`` is frozen."""
        if site.frozen:
            raise HostingFrozenSiteError(FROZEN_SITE_MESSAGE, details=f"Site: {site.name}")

    def get_environment(self, site: Site, env_name: str) -> Environment:
        """Look up one environment of ``site``."""
        return self._client.get_environment(site.id, env_name)

    def code_rebuild(self, site_env: str, on_poll: PollCallback | None = None) -> Workflow:
        """Sync code into a dev or multidev environment and rebuild artifacts.

        Protected environments are refused before any API request is made.

        Args:
            site_env: ``<site>.<env>`` identifier.
            on_poll: Called with each polled workflow state.

        Returns:
            The finished workflow; its ``message`` is the result text.

        Raises:
            HostingValidationError: For ``test``/``live`` or a frozen site.
            HostingNotFoundError: If the site or environment does not exist.
            WorkflowFailedError: If the rebuild workflow fails.
        """
        site_name, env_name = parse_site_env(site_env)
        if env_name.lower() in PROTECTED_ENVIRONMENTS:
            raise HostingValidationError(PROTECTED_ENV_MESSAGE, details=f"Environment: {env_name}")

        site = self.get_site(site_name)
        self.require_site_not_frozen(site)
        env = self.get_environment(site, env_name)

        self._log.info("rebuilding_code", site=site.name, env=env.name)
        workflow = self._client.create_environment_workflow(
            site.id,
            env.id,
            CODE_REBUILD_WORKFLOW,
            params=CODE_REBUILD_PARAMS,
        )
        return self._workflows.wait(workflow, on_poll=on_poll)
