"""Integrations with external systems: the hosting API and Composer."""
