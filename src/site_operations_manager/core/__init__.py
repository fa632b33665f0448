"""Core infrastructure: configuration and the plugin host."""
