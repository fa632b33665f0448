"""Logging configuration for site_operations_manager."""

from site_operations_manager.logging.config import (
    configure_bootstrap_logging,
    configure_logging,
    get_logger,
)

__all__ = ["configure_bootstrap_logging", "configure_logging", "get_logger"]
