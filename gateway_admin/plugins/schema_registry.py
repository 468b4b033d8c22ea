"""Plugin schema registry: reads schema.json from plugin dirs."""
import json
import logging
import os
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class PluginSchemaRegistry:
    """
    Knows which plugins exist and the JSON schema of each one's settings.

    Searches plugin directories for:
      - <plugin_dir>/schema.json: JSON schema for the plugin's settings

    The directory name is the plugin name. Schemas can also be registered
    in code, which takes precedence over files.
    """

    def __init__(self, search_dirs: Optional[List[str]] = None):
        self._search_dirs = search_dirs or []
        self._dir_map: Dict[str, str] = {}
        self._schemas: Dict[str, dict] = {}
        self._build_dir_map()

    def _build_dir_map(self) -> None:
        """Scan search dirs and map plugin names to their directory paths."""
        for search_dir in self._search_dirs:
            if not os.path.isdir(search_dir):
                logger.warning(f"Plugin schema dir '{search_dir}' does not exist")
                continue
            for entry in sorted(os.listdir(search_dir)):
                full_path = os.path.join(search_dir, entry)
                if os.path.isfile(os.path.join(full_path, "schema.json")):
                    self._dir_map[entry] = full_path

    def _load_schema(self, plugin_name: str) -> Optional[dict]:
        plugin_dir = self._dir_map.get(plugin_name)
        if not plugin_dir:
            return None

        schema_path = os.path.join(plugin_dir, "schema.json")
        try:
            with open(schema_path, "r") as f:
                return json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning(f"Failed to read schema for plugin '{plugin_name}': {e}")
            return None

    def register(self, plugin_name: str, schema: dict) -> None:
        """Register (or replace) a plugin schema."""
        self._schemas[plugin_name] = schema

    def has_plugin(self, plugin_name: str) -> bool:
        return plugin_name in self._schemas or plugin_name in self._dir_map

    def get_schema(self, plugin_name: str) -> Optional[dict]:
        """Get the settings schema for a plugin, or None if unknown."""
        if plugin_name not in self._schemas:
            schema = self._load_schema(plugin_name)
            if schema is None:
                return None
            self._schemas[plugin_name] = schema
        return self._schemas[plugin_name]

    def plugin_names(self) -> List[str]:
        return sorted(set(self._schemas) | set(self._dir_map))
