"""Base manager for hosting platform services."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from site_operations_manager.integrations.hosting.client import HostingClient

logger = structlog.get_logger()


class HostingBaseManager:
    """Base class for hosting service managers.

    Holds the API client and a logger bound to ``_entity_name``.
    """

    _entity_name: str = ""

    def __init__(self, client: HostingClient) -> None:
        """Initialize the manager.

        Args:
            client: Hosting API client instance.
        """
        self._client = client
        self._log = logger.bind(entity=self._entity_name)

    @property
    def client(self) -> HostingClient:
        """The underlying API client."""
        return self._client
