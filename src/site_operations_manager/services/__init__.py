"""Service managers that orchestrate integrations for CLI commands."""
