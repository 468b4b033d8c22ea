"""Abstract interface for the versioned key-value store."""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict


class StoreUnavailableError(Exception):
    """Store could not serve the request."""


class CompareFailedError(Exception):
    """Conditional write rejected: the key changed since it was read."""

    def __init__(self, key: str, expected_revision: int):
        super().__init__("value changed before overwritten")
        self.key = key
        self.expected_revision = expected_revision


@dataclass
class StoreResponse:
    """
    Status and body reported by the store.

    Single reads and writes carry ``body["node"]`` with ``key``, ``value``,
    ``createdIndex`` and ``modifiedIndex``. Directory reads carry
    ``body["node"]["nodes"]`` and ``body["count"]``.
    """

    status: int
    body: Dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


def make_node(key: str, value: Any, created: int, modified: int) -> dict:
    """Build the node dict every store implementation reports."""
    return {
        "key": key,
        "value": value,
        "createdIndex": created,
        "modifiedIndex": modified,
    }


def not_found(key: str) -> StoreResponse:
    return StoreResponse(404, {"key": key, "message": "Key not found"})


def format_id(revision: int) -> str:
    """Zero-padded id derived from a store revision, sortable as a string."""
    return "%020d" % revision


class KeyValueStore(ABC):
    """
    Versioned key-value store.

    Keys are hierarchical paths (``/plugin_configs/1``). Every write bumps a
    store-wide revision. A node's ``modifiedIndex`` is the revision of its last
    write, so it only ever grows and is never reused for the same key.
    """

    def __init__(self, prefix: str = ""):
        self._prefix = (prefix or "").rstrip("/")

    def full_key(self, key: str) -> str:
        return self._prefix + key

    @abstractmethod
    def get(self, key: str, is_dir: bool = False) -> StoreResponse:
        """Read one node, or every node below ``key`` when ``is_dir``."""
        ...

    @abstractmethod
    def set(self, key: str, value: dict) -> StoreResponse:
        """Unconditionally write ``value``. 201 when created, 200 when replaced."""
        ...

    @abstractmethod
    def compare_and_set(
        self, key: str, value: dict, expected_revision: int
    ) -> StoreResponse:
        """
        Write ``value`` only if the node's ``modifiedIndex`` equals
        ``expected_revision``.

        Raises:
            CompareFailedError: If the node changed or no longer exists.
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> StoreResponse:
        """Delete one node. 404 when it does not exist."""
        ...

    @abstractmethod
    def generate_id(self) -> str:
        """Reserve a revision and return it as a new resource id."""
        ...
