"""Admin plugin config routes."""
from flask import Blueprint, current_app, jsonify, request

from gateway_admin.config import SUPPORTED_API_VERSIONS
from gateway_admin.exceptions import AdminError
from gateway_admin.services.plugin_config_service import PluginConfigService

admin_plugin_configs_bp = Blueprint(
    "admin_plugin_configs",
    __name__,
    url_prefix="/apisix/admin/plugin_configs",
)


def _get_service() -> PluginConfigService:
    """Get plugin config service from the app container."""
    return current_app.container.plugin_config_service()


def _respond(res):
    return jsonify(res.body), res.status


def _requested_api_version():
    version = request.headers.get("X-API-VERSION")
    if version in SUPPORTED_API_VERSIONS:
        return version
    return None


@admin_plugin_configs_bp.errorhandler(AdminError)
def handle_admin_error(error: AdminError):
    """Render controller failures as ``{"error_msg": ...}``."""
    return jsonify(error.to_dict()), error.status_code


@admin_plugin_configs_bp.route("", methods=["GET"])
@admin_plugin_configs_bp.route("/<config_id>", methods=["GET"])
def get_plugin_configs(config_id=None):
    """
    Get one plugin config, or list them.

    Query params (list only, v3 shape):
        page, page_size: pagination
        name: substring match on ``name``
        label: ``key`` or ``key:value``, comma-separated

    Returns:
        Store status and body
    """
    filters = {}
    if config_id is None:
        filters = {
            "page": request.args.get("page", type=int),
            "page_size": request.args.get("page_size", type=int),
            "name": request.args.get("name"),
            "label": request.args.get("label"),
        }

    res = _get_service().get(
        config_id, api_version=_requested_api_version(), **filters
    )
    return _respond(res)


@admin_plugin_configs_bp.route("", methods=["PUT"])
@admin_plugin_configs_bp.route("/<config_id>", methods=["PUT"])
def put_plugin_config(config_id=None):
    """
    Create or replace a plugin config.

    The id comes from the path or from the body's ``id`` field.

    Returns:
        200/201: Stored node
        400: Identity or validation error
        503: Store unavailable
    """
    conf = request.get_json(silent=True)
    return _respond(_get_service().put(config_id, conf))


@admin_plugin_configs_bp.route("", methods=["POST"])
def post_plugin_config():
    """
    Create a plugin config under a server-assigned id.

    Returns:
        201: Stored node
        400: Body carried an id, or validation error
    """
    conf = request.get_json(silent=True)
    return _respond(_get_service().post(conf))


@admin_plugin_configs_bp.route("/<config_id>", methods=["PATCH"])
@admin_plugin_configs_bp.route("/<config_id>/<path:sub_path>", methods=["PATCH"])
def patch_plugin_config(config_id, sub_path=None):
    """
    Partially update a plugin config.

    Without a sub-path the body is merged into the stored document; with
    one (e.g. ``/plugins/limit-count``) it is applied at that location.

    Returns:
        200: Stored node
        400: Validation error or invalid sub-path
        404: Plugin config not found
        409: Modified concurrently, retry
    """
    conf = request.get_json(silent=True)
    return _respond(_get_service().patch(config_id, conf, sub_path))


@admin_plugin_configs_bp.route("/<config_id>", methods=["DELETE"])
def delete_plugin_config(config_id):
    """
    Delete a plugin config.

    Returns:
        200: Deleted
        400: Still referenced by a route
        404: Not found
    """
    return _respond(_get_service().delete(config_id))
