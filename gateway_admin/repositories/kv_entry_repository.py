"""Key-value store backed by a SQL table (DB-backed)."""
import logging

from sqlalchemy.exc import SQLAlchemyError

from gateway_admin.models.kv_entry import KvEntry, KvRevision
from gateway_admin.store.kv_store import (
    CompareFailedError,
    KeyValueStore,
    StoreResponse,
    StoreUnavailableError,
    format_id,
    make_node,
    not_found,
)
from gateway_admin.utils.transaction import TransactionContext

logger = logging.getLogger(__name__)


def _to_node(row: KvEntry) -> dict:
    return make_node(row.key, row.value, row.create_revision, row.mod_revision)


class SqlKeyValueStore(KeyValueStore):
    """
    Persists nodes in ``kv_entry`` and the store revision in ``kv_revision``.

    Each write increments the revision row under a row lock in the same
    transaction, so revisions are totally ordered across workers. The
    conditional write is an ``UPDATE ... WHERE mod_revision = :expected``;
    zero affected rows means another writer won.
    """

    def __init__(self, session, prefix: str = ""):
        super().__init__(prefix)
        self._session = session

    def _bump_revision(self) -> int:
        counter = (
            self._session.query(KvRevision)
            .filter(KvRevision.id == 1)
            .with_for_update()
            .first()
        )
        if counter is None:
            counter = KvRevision(id=1, revision=0)
            self._session.add(counter)
        counter.revision += 1
        self._session.flush()
        return counter.revision

    def _find(self, full_key: str):
        return self._session.query(KvEntry).filter(KvEntry.key == full_key).first()

    def get(self, key: str, is_dir: bool = False) -> StoreResponse:
        full_key = self.full_key(key)
        try:
            if not is_dir:
                row = self._find(full_key)
                if row is None:
                    return not_found(full_key)
                return StoreResponse(200, {"node": _to_node(row)})

            dir_prefix = full_key.rstrip("/") + "/"
            rows = (
                self._session.query(KvEntry)
                .filter(KvEntry.key.startswith(dir_prefix, autoescape=True))
                .order_by(KvEntry.key)
                .all()
            )
        except SQLAlchemyError as e:
            self._session.rollback()
            raise StoreUnavailableError(str(e)) from e

        nodes = [_to_node(r) for r in rows]
        return StoreResponse(
            200,
            {"node": {"key": full_key, "dir": True, "nodes": nodes}, "count": len(nodes)},
        )

    def set(self, key: str, value: dict) -> StoreResponse:
        full_key = self.full_key(key)
        try:
            with TransactionContext(self._session):
                revision = self._bump_revision()
                row = self._find(full_key)
                created = row is None
                if created:
                    row = KvEntry(
                        key=full_key,
                        value=value,
                        create_revision=revision,
                        mod_revision=revision,
                    )
                    self._session.add(row)
                else:
                    row.value = value
                    row.mod_revision = revision
                self._session.flush()
                node = _to_node(row)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(str(e)) from e

        return StoreResponse(201 if created else 200, {"node": node})

    def compare_and_set(
        self, key: str, value: dict, expected_revision: int
    ) -> StoreResponse:
        full_key = self.full_key(key)
        try:
            with TransactionContext(self._session):
                revision = self._bump_revision()
                updated = (
                    self._session.query(KvEntry)
                    .filter(
                        KvEntry.key == full_key,
                        KvEntry.mod_revision == expected_revision,
                    )
                    .update(
                        {KvEntry.value: value, KvEntry.mod_revision: revision},
                        synchronize_session=False,
                    )
                )
                if updated == 0:
                    raise CompareFailedError(full_key, expected_revision)
                row = self._find(full_key)
                self._session.refresh(row)
                node = _to_node(row)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(str(e)) from e

        return StoreResponse(200, {"node": node})

    def delete(self, key: str) -> StoreResponse:
        full_key = self.full_key(key)
        try:
            with TransactionContext(self._session):
                row = self._find(full_key)
                if row is None:
                    return StoreResponse(404, {"key": full_key, "deleted": "0"})
                self._bump_revision()
                self._session.delete(row)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(str(e)) from e

        return StoreResponse(200, {"key": full_key, "deleted": "1"})

    def generate_id(self) -> str:
        try:
            with TransactionContext(self._session):
                revision = self._bump_revision()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(str(e)) from e
        return format_id(revision)
