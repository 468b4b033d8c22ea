"""CLI commands package."""
from gateway_admin.cli.plugin_configs import plugin_configs_cli

__all__ = ["plugin_configs_cli"]
