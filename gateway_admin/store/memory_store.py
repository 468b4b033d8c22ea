"""In-process key-value store."""
import copy
import logging
import threading
from typing import Dict, Optional

from gateway_admin.store.kv_store import (
    CompareFailedError,
    KeyValueStore,
    StoreResponse,
    format_id,
    make_node,
    not_found,
)

logger = logging.getLogger(__name__)


class InMemoryKeyValueStore(KeyValueStore):
    """
    Keeps nodes in a dict guarded by a lock.

    Used by the test suite and single-process development servers. Values
    are deep-copied on the way in and out so callers never share state with
    the store.
    """

    def __init__(self, prefix: str = ""):
        super().__init__(prefix)
        self._lock = threading.Lock()
        self._nodes: Dict[str, dict] = {}
        self._revision = 0

    def _next_revision(self) -> int:
        self._revision += 1
        return self._revision

    def _node(self, full_key: str) -> Optional[dict]:
        entry = self._nodes.get(full_key)
        if entry is None:
            return None
        return make_node(
            full_key,
            copy.deepcopy(entry["value"]),
            entry["createdIndex"],
            entry["modifiedIndex"],
        )

    def _write(self, full_key: str, value: dict, revision: int) -> dict:
        entry = self._nodes.get(full_key)
        created = entry["createdIndex"] if entry else revision
        self._nodes[full_key] = {
            "value": copy.deepcopy(value),
            "createdIndex": created,
            "modifiedIndex": revision,
        }
        return self._node(full_key)

    @property
    def revision(self) -> int:
        return self._revision

    def get(self, key: str, is_dir: bool = False) -> StoreResponse:
        full_key = self.full_key(key)
        with self._lock:
            if not is_dir:
                node = self._node(full_key)
                if node is None:
                    return not_found(full_key)
                return StoreResponse(200, {"node": node})

            dir_prefix = full_key.rstrip("/") + "/"
            nodes = [
                self._node(k)
                for k in sorted(self._nodes)
                if k.startswith(dir_prefix)
            ]
        return StoreResponse(
            200,
            {"node": {"key": full_key, "dir": True, "nodes": nodes}, "count": len(nodes)},
        )

    def set(self, key: str, value: dict) -> StoreResponse:
        full_key = self.full_key(key)
        with self._lock:
            existed = full_key in self._nodes
            node = self._write(full_key, value, self._next_revision())
        logger.debug(f"set {full_key} at revision {node['modifiedIndex']}")
        return StoreResponse(200 if existed else 201, {"node": node})

    def compare_and_set(
        self, key: str, value: dict, expected_revision: int
    ) -> StoreResponse:
        full_key = self.full_key(key)
        with self._lock:
            entry = self._nodes.get(full_key)
            if entry is None or entry["modifiedIndex"] != expected_revision:
                raise CompareFailedError(full_key, expected_revision)
            node = self._write(full_key, value, self._next_revision())
        return StoreResponse(200, {"node": node})

    def delete(self, key: str) -> StoreResponse:
        full_key = self.full_key(key)
        with self._lock:
            if self._nodes.pop(full_key, None) is None:
                return StoreResponse(404, {"key": full_key, "deleted": "0"})
            self._next_revision()
        return StoreResponse(200, {"key": full_key, "deleted": "1"})

    def generate_id(self) -> str:
        with self._lock:
            return format_id(self._next_revision())
