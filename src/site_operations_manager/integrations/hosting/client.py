"""Hosting platform API client."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

import httpx
import structlog
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from site_operations_manager.__version__ import __version__
from site_operations_manager.integrations.hosting.exceptions import (
    HostingAPIError,
    HostingAuthError,
    HostingConnectionError,
    HostingNotFoundError,
)
from site_operations_manager.integrations.hosting.models import (
    Environment,
    SessionInfo,
    Site,
    User,
    Workflow,
)

if TYPE_CHECKING:
    from site_operations_manager.integrations.hosting.config import (
        HostingConfig,
        HostingSession,
    )

logger = structlog.get_logger()

_UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


class HostingClient:
    """HTTP client for the hosting platform API.

    Example:
        ```python
        from site_operations_manager.integrations.hosting import (
            HostingClient,
            HostingConfig,
            HostingSession,
        )

        with HostingClient(HostingConfig(), HostingSession.load()) as client:
            site = client.find_site("my-site")
            for env in client.list_environments(site.id):
                print(env.name)
        ```
    """

    def __init__(self, config: HostingConfig, session: HostingSession | None = None) -> None:
        """Initialize the client.

        Args:
            config: Connection settings.
            session: Authenticated session. Only ``authorize_machine_token``
                may be called without one.
        """
        self.config = config
        self.session = session
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            "User-Agent": f"siteops/{__version__}",
        }
        if session is not None:
            headers["Authorization"] = f"Bearer {session.session.get_secret_value()}"

        self._client = httpx.Client(
            base_url=config.base_url,
            timeout=httpx.Timeout(config.timeout),
            verify=config.verify_ssl,
            headers=headers,
        )
        self._retrying = Retrying(
            retry=retry_if_exception_type(HostingConnectionError),
            stop=stop_after_attempt(config.retries),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        )
        logger.debug(
            "Hosting client initialized",
            api_url=config.base_url,
            authenticated=session is not None,
        )

    def __enter__(self) -> HostingClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    @staticmethod
    def _is_uuid(value: str) -> bool:
        """Check if a string looks like a UUID."""
        return bool(_UUID_PATTERN.match(value))

    def _request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """Make an HTTP request, retrying transport failures.

        Raises:
            HostingConnectionError: On connection failure or timeout.
            HostingAuthError: On 401/403.
            HostingNotFoundError: On 404.
            HostingAPIError: On other error responses.
        """
        return self._retrying(self._send, method, endpoint, **kwargs)

    def _send(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """Perform a single HTTP request and translate the response."""
        try:
            response = self._client.request(method, endpoint, **kwargs)
        except httpx.ConnectError as e:
            logger.error("Hosting API connection error", endpoint=endpoint, error=str(e))
            raise HostingConnectionError(
                f"Failed to connect to the hosting API: {e}",
                details=str(e),
            ) from e
        except httpx.TimeoutException as e:
            logger.error("Hosting API timeout", endpoint=endpoint, error=str(e))
            raise HostingConnectionError(
                "Request to the hosting API timed out",
                details=str(e),
            ) from e

        if response.status_code == 401:
            raise HostingAuthError(
                "Your session is invalid or has expired",
                details="Run 'siteops auth login' to start a new session",
            )
        if response.status_code == 403:
            raise HostingAuthError(
                "Access denied",
                details="Your user may not have permission for this site",
            )
        if response.status_code == 404:
            raise HostingNotFoundError("Resource not found", status_code=404)
        if response.status_code >= 400:
            try:
                error_data = response.json()
                message = (
                    error_data.get("message", response.text)
                    if isinstance(error_data, dict)
                    else str(error_data)
                )
            except ValueError:
                message = response.text
            raise HostingAPIError(
                f"Hosting API error: {message}",
                status_code=response.status_code,
                details=response.text,
            )

        if response.status_code == 204:
            return {}
        return response.json()

    # -----------------------------------------------------------------------
    # Authentication
    # -----------------------------------------------------------------------

    def authorize_machine_token(self, machine_token: str) -> SessionInfo:
        """Exchange a machine token for a session."""
        logger.debug("Exchanging machine token for session")
        data = self._request(
            "POST",
            "/authorize/machine-token",
            json={"machine_token": machine_token, "client": "siteops"},
        )
        return SessionInfo.model_validate(data)

    def get_user(self, user_id: str) -> User:
        """Get a user profile."""
        data = self._request("GET", f"/users/{user_id}")
        return User.from_api_response(data)

    # -----------------------------------------------------------------------
    # Sites and environments
    # -----------------------------------------------------------------------

    def get_site(self, site_id: str) -> Site:
        """Get a site by UUID."""
        logger.debug("Getting site", site_id=site_id)
        data = self._request("GET", f"/sites/{site_id}")
        return Site.from_api_response(data)

    def get_site_id(self, name: str) -> str:
        """Resolve a site machine name to its UUID."""
        data = self._request("GET", f"/site-names/{name}")
        return str(data["id"])

    def find_site(self, name_or_id: str) -> Site:
        """Find a site by machine name or UUID.

        Raises:
            HostingNotFoundError: If no accessible site matches.
        """
        try:
            if self._is_uuid(name_or_id):
                return self.get_site(name_or_id)
            return self.get_site(self.get_site_id(name_or_id))
        except HostingNotFoundError as e:
            raise HostingNotFoundError(
                f"Could not locate a site your user may access identified by {name_or_id}.",
                status_code=404,
            ) from e

    def list_environments(self, site_id: str) -> list[Environment]:
        """List a site's environments."""
        data = self._request("GET", f"/sites/{site_id}/environments")
        envs = [
            Environment.from_api_response(env_id, site_id, env_data or {})
            for env_id, env_data in (data or {}).items()
        ]
        logger.debug("Listed environments", site_id=site_id, count=len(envs))
        return envs

    def get_environment(self, site_id: str, env_id: str) -> Environment:
        """Get one environment of a site.

        Raises:
            HostingNotFoundError: If the environment does not exist.
        """
        for env in self.list_environments(site_id):
            if env.id == env_id:
                return env
        raise HostingNotFoundError(
            f"Could not find an environment identified by {env_id}.",
            status_code=404,
        )

    # -----------------------------------------------------------------------
    # Workflows
    # -----------------------------------------------------------------------

    def create_environment_workflow(
        self,
        site_id: str,
        env_id: str,
        workflow_type: str,
        params: dict[str, Any] | None = None,
    ) -> Workflow:
        """Start a workflow against an environment."""
        logger.info(
            "Creating workflow",
            site_id=site_id,
            env=env_id,
            workflow_type=workflow_type,
        )
        data = self._request(
            "POST",
            f"/sites/{site_id}/environments/{env_id}/workflows",
            json={"type": workflow_type, "params": params or {}},
        )
        return Workflow.from_api_response(data, site_id=site_id)

    def get_workflow(self, site_id: str, workflow_id: str) -> Workflow:
        """Fetch the current state of a workflow."""
        data = self._request("GET", f"/sites/{site_id}/workflows/{workflow_id}")
        return Workflow.from_api_response(data, site_id=site_id)
