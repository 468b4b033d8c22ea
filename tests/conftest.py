"""Shared test fixtures."""
import pytest

from gateway_admin.plugins.schema_registry import PluginSchemaRegistry
from gateway_admin.services.route_snapshot import Route, RouteSnapshotProvider
from gateway_admin.services.schema_validator import SchemaValidator
from gateway_admin.store.memory_store import InMemoryKeyValueStore


class FakeRouteSnapshot(RouteSnapshotProvider):
    """Route snapshot whose contents the test controls."""

    def __init__(self, routes=None, error=None):
        self.routes = list(routes or [])
        self.error = error

    def list(self):
        if self.error is not None:
            raise self.error
        return list(self.routes), len(self.routes)

    def add(self, route_id, plugin_config_id=None):
        self.routes.append(Route(id=str(route_id), plugin_config_id=plugin_config_id))


@pytest.fixture
def app():
    """Create application for testing."""
    from gateway_admin.app import create_app

    app = create_app({
        "TESTING": True,
        "STORE_BACKEND": "memory",
        "ROUTE_SNAPSHOT_REFRESH_SECONDS": 0,
    })
    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def schema_registry():
    """Registry with a handful of in-code plugin schemas."""
    registry = PluginSchemaRegistry()
    registry.register("x", {"type": "object"})
    registry.register("y", {"type": "object"})
    registry.register("limit-count", {
        "type": "object",
        "properties": {
            "count": {"type": "integer", "exclusiveMinimum": 0},
            "time_window": {"type": "integer", "exclusiveMinimum": 0},
        },
        "required": ["count", "time_window"],
    })
    return registry


@pytest.fixture
def validator(schema_registry):
    return SchemaValidator(schema_registry)


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def route_snapshot():
    return FakeRouteSnapshot()
