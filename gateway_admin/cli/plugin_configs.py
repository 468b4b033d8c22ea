"""Plugin config management CLI commands."""
import json

import click
from flask import current_app
from flask.cli import with_appcontext

from gateway_admin.exceptions import AdminError


def _service():
    return current_app.container.plugin_config_service()


def _echo_response(res):
    click.echo(f"{res.status} {json.dumps(res.body, indent=2, sort_keys=True)}")


@click.group("plugin-configs")
def plugin_configs_cli():
    """Plugin config management commands."""
    pass


@plugin_configs_cli.command("init-store")
@with_appcontext
def init_store():
    """Create the key-value store tables (SQL backend only)."""
    if current_app.config["STORE_BACKEND"] != "sql":
        click.echo("Store backend is not SQL, nothing to create.")
        return

    from gateway_admin.extensions import db
    from gateway_admin.models import KvEntry, KvRevision  # noqa: F401

    db.create_all()
    click.echo("Key-value store tables created.")


@plugin_configs_cli.command("list")
@with_appcontext
def list_plugin_configs():
    """List all stored plugin configs."""
    try:
        res = _service().get(api_version="v3")
    except AdminError as e:
        raise click.ClickException(e.message)

    if not res.body.get("list"):
        click.echo("No plugin configs stored.")
        return

    for node in res.body["list"]:
        value = node["value"]
        plugins = ", ".join(sorted(value.get("plugins", {}))) or "-"
        click.echo(f"{value['id']} (rev {node['modifiedIndex']}): {plugins}")


@plugin_configs_cli.command("get")
@click.argument("config_id")
@with_appcontext
def get_plugin_config(config_id):
    """Show one plugin config."""
    try:
        res = _service().get(config_id)
    except AdminError as e:
        raise click.ClickException(e.message)
    _echo_response(res)


@plugin_configs_cli.command("put")
@click.argument("config_id")
@click.argument("conf_file", type=click.File("r"))
@with_appcontext
def put_plugin_config(config_id, conf_file):
    """Create or replace a plugin config from a JSON file ("-" for stdin)."""
    try:
        conf = json.load(conf_file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON: {e}")

    try:
        res = _service().put(config_id, conf)
    except AdminError as e:
        raise click.ClickException(e.message)
    _echo_response(res)


@plugin_configs_cli.command("delete")
@click.argument("config_id")
@with_appcontext
def delete_plugin_config(config_id):
    """Delete a plugin config no route references."""
    try:
        res = _service().delete(config_id)
    except AdminError as e:
        raise click.ClickException(e.message)
    _echo_response(res)
