"""Schema validation for plugin config documents."""
import logging
from typing import Any, Dict, Optional, Tuple

from jsonschema import Draft7Validator
from jsonschema.exceptions import best_match

from gateway_admin.plugins.schema_registry import PluginSchemaRegistry
from gateway_admin.schemas.plugin_config import plugin_config_schema, plugin_meta_schema

logger = logging.getLogger(__name__)

ValidationOutcome = Tuple[bool, Optional[str]]


def _first_error(validator: Draft7Validator, instance: Any) -> Optional[str]:
    error = best_match(validator.iter_errors(instance))
    if error is None:
        return None
    path = ".".join(str(p) for p in error.absolute_path)
    if path:
        return f"property \"{path}\" validation failed: {error.message}"
    return error.message


class SchemaValidator:
    """
    Checks plugin config documents.

    The composite document is checked against ``plugin_config_schema``;
    the nested ``plugins`` map is checked plugin by plugin against the
    schemas held by the registry.
    """

    def __init__(
        self,
        schema_registry: PluginSchemaRegistry,
        document_schema: Optional[dict] = None,
    ):
        self._registry = schema_registry
        self._document_validator = Draft7Validator(document_schema or plugin_config_schema)
        self._meta_validator = Draft7Validator(plugin_meta_schema)
        self._plugin_validators: Dict[str, Draft7Validator] = {}

    def _plugin_validator(self, plugin_name: str) -> Optional[Draft7Validator]:
        schema = self._registry.get_schema(plugin_name)
        if schema is None:
            return None
        cached = self._plugin_validators.get(plugin_name)
        if cached is None or cached.schema is not schema:
            cached = Draft7Validator(schema)
            self._plugin_validators[plugin_name] = cached
        return cached

    def validate_document(self, document: Any) -> ValidationOutcome:
        """Validate the whole plugin config document."""
        err = _first_error(self._document_validator, document)
        if err:
            return False, err
        return True, None

    def validate_plugin_settings(self, plugins: Any) -> ValidationOutcome:
        """Validate every entry of the ``plugins`` map."""
        if not isinstance(plugins, dict):
            return False, "plugins must be an object"

        for name, settings in plugins.items():
            if not isinstance(settings, dict):
                return False, f"invalid plugin conf for plugin [{name}]: must be an object"

            validator = self._plugin_validator(name)
            if validator is None:
                return False, f"unknown plugin [{name}]"

            settings = dict(settings)
            meta = settings.pop("_meta", None)
            if meta is not None:
                err = _first_error(self._meta_validator, meta)
                if err:
                    return False, f"failed to check the configuration of plugin {name} err: _meta: {err}"

            err = _first_error(validator, settings)
            if err:
                logger.debug(f"plugin {name} settings rejected: {err}")
                return False, f"failed to check the configuration of plugin {name} err: {err}"

        return True, None
