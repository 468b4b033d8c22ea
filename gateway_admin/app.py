"""Flask application factory."""
import logging

from flask import Flask, jsonify
from typing import Optional, Dict, Any

from gateway_admin import __version__

logger = logging.getLogger(__name__)


def create_app(config: Optional[Dict[str, Any]] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        config: Optional configuration dictionary to override defaults.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Load configuration
    from gateway_admin.config import get_config, container_settings, TestingConfig
    if config:
        base = TestingConfig if config.get("TESTING") else get_config()
        app.config.from_object(base)
        app.config.update(config)
    else:
        from gateway_admin.utils.startup_check import validate_environment
        validate_environment()
        app.config.from_object(get_config()())

    # Initialize extensions
    from gateway_admin.extensions import db
    db.init_app(app)

    # Initialize DI container
    from gateway_admin.container import Container
    container = Container()
    container.config.from_dict(container_settings(app.config))
    container.db_session.override(db.session)
    app.container = container

    # Register blueprints
    from gateway_admin.routes.admin import admin_plugin_configs_bp
    app.register_blueprint(admin_plugin_configs_bp)

    # CLI
    from gateway_admin.cli import plugin_configs_cli
    app.cli.add_command(plugin_configs_cli)

    # Health check endpoint
    @app.route("/api/v1/health")
    def health():
        """Health check endpoint."""
        return jsonify({
            "status": "ok",
            "service": "gateway-admin",
            "version": __version__,
            "store": app.config["STORE_BACKEND"],
        }), 200

    # Error handlers
    from gateway_admin.exceptions import AdminError

    @app.errorhandler(AdminError)
    def admin_error(error):
        """Handle controller errors raised outside the admin blueprint."""
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 errors."""
        return jsonify({"error_msg": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        """Handle 405 errors."""
        return jsonify({"error_msg": "Method not allowed"}), 405

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        logger.error(f"Unhandled error: {error}")
        return jsonify({"error_msg": "Internal server error"}), 500

    return app
