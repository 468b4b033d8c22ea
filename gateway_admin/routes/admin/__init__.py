"""Admin routes package."""
from gateway_admin.routes.admin.plugin_configs import admin_plugin_configs_bp

__all__ = [
    "admin_plugin_configs_bp",
]
