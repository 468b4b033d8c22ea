"""Database models package."""
from gateway_admin.models.kv_entry import KvEntry, KvRevision

__all__ = [
    "KvEntry",
    "KvRevision",
]
