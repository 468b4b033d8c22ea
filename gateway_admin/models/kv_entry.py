"""Key-value store tables."""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, BigInteger, Integer, JSON
from sqlalchemy.dialects.postgresql import JSONB
from gateway_admin.extensions import db


class KvEntry(db.Model):
    """One stored node: a JSON document under a hierarchical key."""

    __tablename__ = "kv_entry"

    key = Column(String(512), primary_key=True)
    value = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)
    create_revision = Column(BigInteger, nullable=False)
    mod_revision = Column(BigInteger, nullable=False, index=True)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<KvEntry {self.key} @{self.mod_revision}>"


class KvRevision(db.Model):
    """Single-row, store-wide revision counter."""

    __tablename__ = "kv_revision"

    id = Column(Integer, primary_key=True, default=1)
    revision = Column(BigInteger, nullable=False, default=0)

    def __repr__(self):
        return f"<KvRevision {self.revision}>"
