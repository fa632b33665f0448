"""Shared CLI output helpers.

Usage:
    from site_operations_manager.cli.output import Table

    table = Table(title="Installed Plugins")
    table.add_column("Name", style="cyan")
    table.add_row("vendor/example-plugin")
    console.print(table)
"""

from site_operations_manager.cli.output.table import Table

__all__ = ["Table"]
