"""Composer CLI integration."""

from site_operations_manager.integrations.composer.client import (
    ComposerBinaryNotFoundError,
    ComposerClient,
    ComposerCommandError,
    ComposerError,
)
from site_operations_manager.integrations.composer.models import ComposerCommandResult

__all__ = [
    "ComposerBinaryNotFoundError",
    "ComposerClient",
    "ComposerCommandError",
    "ComposerCommandResult",
    "ComposerError",
]
