"""Snapshot of the routes that may reference plugin configs."""
import logging
import threading
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from gateway_admin.store.kv_store import KeyValueStore, StoreUnavailableError

logger = logging.getLogger(__name__)


class RouteSnapshotUnavailable(Exception):
    """Route snapshot could not be loaded."""


@dataclass
class Route:
    """Read-only view of a stored route."""

    id: str
    plugin_config_id: Optional[str] = None
    value: dict = field(default_factory=dict)

    @classmethod
    def from_node(cls, node: dict) -> "Route":
        value = node.get("value") or {}
        route_id = value.get("id") or node["key"].rsplit("/", 1)[-1]
        plugin_config_id = value.get("plugin_config_id")
        return cls(
            id=str(route_id),
            plugin_config_id=None if plugin_config_id is None else str(plugin_config_id),
            value=value,
        )


class RouteSnapshotProvider(ABC):
    """Source of the current route set."""

    @abstractmethod
    def list(self) -> Tuple[List[Route], Optional[int]]:
        """
        Return the routes and a version marker.

        Raises:
            RouteSnapshotUnavailable: If the routes cannot be read.
        """
        ...


class StoreRouteSnapshot(RouteSnapshotProvider):
    """
    Routes read from the store under ``/routes``, kept in memory and reloaded
    once they are older than ``refresh_seconds``.

    The version marker is the highest ``modifiedIndex`` seen. A snapshot is
    only consistent as of its own load.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str = "/routes",
        refresh_seconds: float = 5,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store = store
        self._key = key
        self._refresh_seconds = refresh_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._routes: List[Route] = []
        self._version: Optional[int] = None
        self._loaded_at: Optional[float] = None

    def _is_stale(self) -> bool:
        if self._loaded_at is None:
            return True
        return self._clock() - self._loaded_at >= self._refresh_seconds

    def _reload(self) -> None:
        try:
            res = self._store.get(self._key, is_dir=True)
        except StoreUnavailableError as e:
            logger.error(f"failed to load routes [{self._key}]: {e}")
            raise RouteSnapshotUnavailable(str(e)) from e

        if res.status != 200:
            raise RouteSnapshotUnavailable(
                f"failed to load routes [{self._key}]: status {res.status}"
            )

        nodes = [n for n in res.body["node"].get("nodes", []) if n.get("value")]
        self._routes = [Route.from_node(n) for n in nodes]
        self._version = max((n["modifiedIndex"] for n in nodes), default=0)
        self._loaded_at = self._clock()
        logger.debug(f"loaded {len(self._routes)} routes, version {self._version}")

    def invalidate(self) -> None:
        """Force a reload on the next ``list()``."""
        with self._lock:
            self._loaded_at = None

    def list(self) -> Tuple[List[Route], Optional[int]]:
        with self._lock:
            if self._is_stale():
                self._reload()
            return list(self._routes), self._version
