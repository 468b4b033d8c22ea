"""Versioned key-value store."""
from gateway_admin.store.kv_store import (
    CompareFailedError,
    KeyValueStore,
    StoreResponse,
    StoreUnavailableError,
)
from gateway_admin.store.memory_store import InMemoryKeyValueStore

__all__ = [
    "CompareFailedError",
    "KeyValueStore",
    "StoreResponse",
    "StoreUnavailableError",
    "InMemoryKeyValueStore",
]
