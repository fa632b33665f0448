"""Command-line interface for site_operations_manager."""
