"""Dependency injection container."""
from dependency_injector import containers, providers

from gateway_admin.plugins.schema_registry import PluginSchemaRegistry
from gateway_admin.repositories.kv_entry_repository import SqlKeyValueStore
from gateway_admin.services.activity_logger import ActivityLogger
from gateway_admin.services.plugin_config_service import PluginConfigService
from gateway_admin.services.route_snapshot import StoreRouteSnapshot
from gateway_admin.services.schema_validator import SchemaValidator
from gateway_admin.store.memory_store import InMemoryKeyValueStore


class Container(containers.DeclarativeContainer):
    """
    Application dependency injection container.

    Uses dependency-injector for managing service dependencies
    and lifecycle.

    Usage:
        container = Container()
        container.config.from_dict(container_settings(app.config))
        container.db_session.override(db.session)

        service = container.plugin_config_service()
    """

    # Configuration
    config = providers.Configuration()

    # Database session - must be overridden with actual db.session
    db_session = providers.Dependency()

    # ==================
    # Store
    # ==================

    kv_store = providers.Selector(
        config.store_backend,
        sql=providers.Singleton(
            SqlKeyValueStore,
            session=db_session,
            prefix=config.store_key_prefix,
        ),
        memory=providers.Singleton(
            InMemoryKeyValueStore,
            prefix=config.store_key_prefix,
        ),
    )

    # ==================
    # Validation
    # ==================

    schema_registry = providers.Singleton(
        PluginSchemaRegistry,
        search_dirs=config.plugin_schema_dirs,
    )

    schema_validator = providers.Singleton(
        SchemaValidator,
        schema_registry=schema_registry,
    )

    # ==================
    # Routes
    # ==================

    route_snapshot = providers.Singleton(
        StoreRouteSnapshot,
        store=kv_store,
        refresh_seconds=config.route_snapshot_refresh_seconds,
    )

    # ==================
    # Services
    # ==================

    activity_logger = providers.Singleton(
        ActivityLogger
    )

    plugin_config_service = providers.Factory(
        PluginConfigService,
        store=kv_store,
        validator=schema_validator,
        route_snapshot=route_snapshot,
        activity_logger=activity_logger,
        api_version=config.admin_api_version,
    )
