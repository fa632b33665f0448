"""Shared fixtures for hosting service tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from site_operations_manager.integrations.hosting.models import Site


@pytest.fixture
def site() -> Site:
    """An unfrozen site."""
    return Site(id="11111111-2222-3333-4444-555555555555", name="my-site")


@pytest.fixture
def mock_hosting_client(site: Site) -> MagicMock:
    """Create a mock HostingClient that finds ``site``."""
    client = MagicMock()
    client.find_site.return_value = site
    return client


@pytest.fixture
def sleep() -> MagicMock:
    """Sleep replacement so polling tests run instantly."""
    return MagicMock()
