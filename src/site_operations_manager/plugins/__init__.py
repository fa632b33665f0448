"""Built-in siteops plugins."""
