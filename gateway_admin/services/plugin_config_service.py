"""Plugin config lifecycle service."""
import logging
from typing import Any, Callable, Optional

from gateway_admin.exceptions import (
    ConcurrencyConflict,
    DependencyError,
    IdMismatch,
    InvalidConfiguration,
    MissingConfiguration,
    MissingId,
    ResourceInUse,
    SchemaViolation,
    UnexpectedId,
)
from gateway_admin.services.activity_logger import ActivityLogger
from gateway_admin.services.merge_patch import deep_merge, patch_at_path
from gateway_admin.services.response_adapter import filter_response, fix_count
from gateway_admin.services.route_snapshot import (
    RouteSnapshotProvider,
    RouteSnapshotUnavailable,
)
from gateway_admin.services.schema_validator import SchemaValidator
from gateway_admin.store.kv_store import (
    CompareFailedError,
    KeyValueStore,
    StoreResponse,
    StoreUnavailableError,
)
from gateway_admin.utils.timestamps import inject_timestamp

logger = logging.getLogger(__name__)

KIND = "plugin_config"
COLLECTION_KEY = "/plugin_configs"


def _has_id(value: Any) -> bool:
    return value is not None and value != ""


class PluginConfigService:
    """
    Create, read, update and delete plugin configs.

    Every operation is independent: nothing is cached between calls and
    the store's compare-and-swap is the only concurrency control. Failures
    raise ``AdminError`` subclasses; successful calls return the store's
    ``StoreResponse`` unchanged (reads are count-fixed and shaped for the
    admin API version).
    """

    def __init__(
        self,
        store: KeyValueStore,
        validator: SchemaValidator,
        route_snapshot: RouteSnapshotProvider,
        activity_logger: Optional[ActivityLogger] = None,
        api_version: str = "v3",
    ):
        self._store = store
        self._validator = validator
        self._route_snapshot = route_snapshot
        self._activity_logger = activity_logger or ActivityLogger()
        self._api_version = api_version

    @staticmethod
    def _key(resource_id: Optional[Any] = None) -> str:
        if _has_id(resource_id):
            return f"{COLLECTION_KEY}/{resource_id}"
        return COLLECTION_KEY

    def _call_store(self, action: str, key: str, fn: Callable, *args) -> StoreResponse:
        try:
            return fn(*args)
        except StoreUnavailableError as e:
            logger.error(f"failed to {action} plugin config[{key}]: {e}")
            raise DependencyError(str(e)) from e

    def _audit(self, operation: str, resource_id: Any, res: StoreResponse) -> None:
        node = res.body.get("node") or {}
        self._activity_logger.log_mutation(
            KIND, operation, str(resource_id), res.status, node.get("modifiedIndex")
        )

    def check_conf(self, resource_id: Optional[Any], conf: Any, require_id: bool) -> dict:
        """
        Apply identity rules and schema validation to a candidate document.

        Args:
            resource_id: Id from the request path, if any
            conf: Candidate document
            require_id: False only when the server assigns the id

        Returns:
            The canonical document with ``id`` set to the resolved id.

        Raises:
            MissingConfiguration, InvalidConfiguration, MissingId,
            UnexpectedId, IdMismatch, SchemaViolation
        """
        if conf is None:
            raise MissingConfiguration("missing configurations")
        if not isinstance(conf, dict):
            raise InvalidConfiguration("invalid configuration")

        conf = dict(conf)
        body_id = conf.get("id")
        resolved = resource_id if _has_id(resource_id) else body_id

        if require_id and not _has_id(resolved):
            raise MissingId("missing id")

        if not require_id and _has_id(resolved):
            raise UnexpectedId("wrong id, do not need it")

        if require_id and _has_id(body_id) and str(body_id) != str(resolved):
            raise IdMismatch("wrong id")

        if _has_id(resolved):
            conf["id"] = resolved

        logger.info(f"conf: {conf}")
        ok, err = self._validator.validate_document(conf)
        if not ok:
            raise SchemaViolation(f"invalid configuration: {err}")

        ok, err = self._validator.validate_plugin_settings(conf["plugins"])
        if not ok:
            raise SchemaViolation(err)

        return conf

    def _previous_value(self, key: str) -> Optional[dict]:
        res = self._call_store("get", key, self._store.get, key)
        if res.status == 404:
            return None
        if res.status != 200:
            logger.error(f"failed to get plugin config[{key}]: status {res.status}")
            raise DependencyError(f"unexpected store status {res.status} for {key}")
        return res.body["node"]["value"]

    def put(self, resource_id: Optional[Any], conf: Any) -> StoreResponse:
        """Create or fully replace a plugin config (last write wins)."""
        conf = self.check_conf(resource_id, conf, require_id=True)
        resource_id = conf["id"]
        key = self._key(resource_id)

        inject_timestamp(conf, self._previous_value(key))

        res = self._call_store("put", key, self._store.set, key, conf)
        self._audit("put", resource_id, res)
        return res

    def post(self, conf: Any) -> StoreResponse:
        """Create a plugin config under a server-assigned id."""
        conf = self.check_conf(None, conf, require_id=False)

        resource_id = self._call_store("generate id for", COLLECTION_KEY, self._store.generate_id)
        conf["id"] = resource_id
        key = self._key(resource_id)
        inject_timestamp(conf)

        res = self._call_store("post", key, self._store.set, key, conf)
        self._audit("post", resource_id, res)
        return res

    def get(
        self,
        resource_id: Optional[Any] = None,
        api_version: Optional[str] = None,
        **filters,
    ) -> StoreResponse:
        """
        Read one plugin config, or list them all when no id is given.

        ``filters`` (``page``, ``page_size``, ``name``, ``label``) only apply
        to collection reads in the v3 shape.
        """
        key = self._key(resource_id)
        res = self._call_store("get", key, self._store.get, key, not _has_id(resource_id))

        body = fix_count(res.body, resource_id)
        body = filter_response(body, api_version or self._api_version, **filters)
        return StoreResponse(res.status, body)

    def _check_not_referenced(self, resource_id: Any) -> None:
        try:
            routes, _version = self._route_snapshot.list()
        except RouteSnapshotUnavailable as e:
            raise DependencyError(str(e)) from e

        for route in routes:
            if route.plugin_config_id is not None and route.plugin_config_id == str(resource_id):
                raise ResourceInUse(
                    "can not delete this plugin config,"
                    f" route [{route.id}] is still using it now"
                )

    def delete(self, resource_id: Optional[Any]) -> StoreResponse:
        """
        Delete a plugin config no route references.

        The reference check reads the route snapshot and then deletes; a
        route created in between is not detected.
        """
        if not _has_id(resource_id):
            raise MissingId("missing plugin config id")

        self._check_not_referenced(resource_id)

        key = self._key(resource_id)
        res = self._call_store("delete", key, self._store.delete, key)
        self._audit("delete", resource_id, res)
        return res

    def patch(
        self,
        resource_id: Optional[Any],
        conf: Any,
        sub_path: Optional[str] = None,
    ) -> StoreResponse:
        """
        Merge or patch a stored plugin config.

        Without ``sub_path`` the body is deep-merged into the stored
        document; with one it is applied at that location. The write is
        conditioned on the revision that was read, so a concurrent change
        makes this call fail with ``ConcurrencyConflict`` instead of being
        overwritten. Callers retry the whole call.
        """
        if not _has_id(resource_id):
            raise MissingId("missing plugin config id")

        if conf is None:
            raise MissingConfiguration("missing new configuration")

        if not sub_path and not isinstance(conf, dict):
            raise InvalidConfiguration("invalid configuration")

        key = self._key(resource_id)
        res_old = self._call_store("get", key, self._store.get, key)
        if res_old.status != 200:
            return res_old

        node = res_old.body["node"]
        stored = node["value"]
        revision = node["modifiedIndex"]
        logger.info(f"key: {key} old value: {stored} revision: {revision}")

        if sub_path:
            candidate = patch_at_path(stored, sub_path, conf)
        else:
            candidate = deep_merge(stored, conf)

        if isinstance(candidate, dict):
            inject_timestamp(candidate, stored)
        logger.info(f"new conf: {candidate}")

        candidate = self.check_conf(resource_id, candidate, require_id=True)

        try:
            res = self._call_store(
                "set new", key, self._store.compare_and_set, key, candidate, revision
            )
        except CompareFailedError as e:
            logger.warning(f"plugin config[{key}] changed since revision {revision}")
            raise ConcurrencyConflict(str(e)) from e

        self._audit("patch", resource_id, res)
        return res
