"""Repository implementations."""
from gateway_admin.repositories.kv_entry_repository import SqlKeyValueStore

__all__ = [
    "SqlKeyValueStore",
]
