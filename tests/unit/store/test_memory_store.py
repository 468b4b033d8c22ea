"""Tests for the in-process key-value store."""
import threading

import pytest

from gateway_admin.store.kv_store import CompareFailedError, format_id
from gateway_admin.store.memory_store import InMemoryKeyValueStore


class TestInMemoryKeyValueStore:
    """Tests for InMemoryKeyValueStore."""

    def test_get_missing_key(self, memory_store):
        res = memory_store.get("/plugin_configs/1")

        assert res.status == 404
        assert res.body["message"] == "Key not found"

    def test_set_creates_then_replaces(self, memory_store):
        created = memory_store.set("/plugin_configs/1", {"plugins": {}})
        replaced = memory_store.set("/plugin_configs/1", {"plugins": {"x": {}}})

        assert created.status == 201
        assert replaced.status == 200
        node = replaced.body["node"]
        assert node["createdIndex"] == created.body["node"]["createdIndex"]
        assert node["modifiedIndex"] > created.body["node"]["modifiedIndex"]

    def test_get_returns_node(self, memory_store):
        memory_store.set("/plugin_configs/1", {"plugins": {}})

        res = memory_store.get("/plugin_configs/1")

        assert res.status == 200
        assert res.body["node"]["key"] == "/plugin_configs/1"
        assert res.body["node"]["value"] == {"plugins": {}}

    def test_values_are_copied(self, memory_store):
        value = {"plugins": {}}
        memory_store.set("/plugin_configs/1", value)
        value["plugins"]["x"] = {}

        read = memory_store.get("/plugin_configs/1").body["node"]["value"]
        read["plugins"]["y"] = {}

        assert memory_store.get("/plugin_configs/1").body["node"]["value"] == {"plugins": {}}

    def test_directory_read(self, memory_store):
        memory_store.set("/plugin_configs/2", {"plugins": {}})
        memory_store.set("/plugin_configs/1", {"plugins": {}})
        memory_store.set("/routes/1", {"uri": "/"})

        res = memory_store.get("/plugin_configs", is_dir=True)

        assert res.status == 200
        assert res.body["count"] == 2
        assert res.body["node"]["dir"] is True
        assert [n["key"] for n in res.body["node"]["nodes"]] == [
            "/plugin_configs/1",
            "/plugin_configs/2",
        ]

    def test_empty_directory_read(self, memory_store):
        res = memory_store.get("/plugin_configs", is_dir=True)

        assert res.status == 200
        assert res.body["count"] == 0
        assert res.body["node"]["nodes"] == []

    def test_compare_and_set_succeeds_on_matching_revision(self, memory_store):
        rev = memory_store.set("/plugin_configs/1", {"plugins": {}}).body["node"]["modifiedIndex"]

        res = memory_store.compare_and_set("/plugin_configs/1", {"plugins": {"x": {}}}, rev)

        assert res.status == 200
        assert res.body["node"]["modifiedIndex"] > rev
        assert res.body["node"]["value"] == {"plugins": {"x": {}}}

    def test_compare_and_set_fails_on_stale_revision(self, memory_store):
        rev = memory_store.set("/plugin_configs/1", {"plugins": {}}).body["node"]["modifiedIndex"]
        memory_store.set("/plugin_configs/1", {"plugins": {"y": {}}})

        with pytest.raises(CompareFailedError) as exc_info:
            memory_store.compare_and_set("/plugin_configs/1", {"plugins": {"x": {}}}, rev)

        assert str(exc_info.value) == "value changed before overwritten"
        assert memory_store.get("/plugin_configs/1").body["node"]["value"] == {"plugins": {"y": {}}}

    def test_compare_and_set_fails_on_deleted_key(self, memory_store):
        rev = memory_store.set("/plugin_configs/1", {"plugins": {}}).body["node"]["modifiedIndex"]
        memory_store.delete("/plugin_configs/1")

        with pytest.raises(CompareFailedError):
            memory_store.compare_and_set("/plugin_configs/1", {"plugins": {}}, rev)

    def test_modified_index_not_reused_after_recreate(self, memory_store):
        first = memory_store.set("/plugin_configs/1", {"plugins": {}}).body["node"]["modifiedIndex"]
        memory_store.delete("/plugin_configs/1")
        second = memory_store.set("/plugin_configs/1", {"plugins": {}}).body["node"]["modifiedIndex"]

        assert second > first

    def test_delete(self, memory_store):
        memory_store.set("/plugin_configs/1", {"plugins": {}})

        res = memory_store.delete("/plugin_configs/1")

        assert res.status == 200
        assert res.body["deleted"] == "1"
        assert memory_store.get("/plugin_configs/1").status == 404
        assert memory_store.revision == 2

    def test_delete_missing_key(self, memory_store):
        res = memory_store.delete("/plugin_configs/1")

        assert res.status == 404
        assert res.body["deleted"] == "0"

    def test_generate_id_is_padded_and_increasing(self, memory_store):
        first = memory_store.generate_id()
        second = memory_store.generate_id()

        assert len(first) == 20
        assert first == format_id(1)
        assert second > first

    def test_prefix_is_applied(self):
        store = InMemoryKeyValueStore(prefix="/apisix/")

        res = store.set("/plugin_configs/1", {"plugins": {}})

        assert res.body["node"]["key"] == "/apisix/plugin_configs/1"

    def test_concurrent_compare_and_set_has_one_winner(self, memory_store):
        rev = memory_store.set("/plugin_configs/1", {"plugins": {}}).body["node"]["modifiedIndex"]
        results = []

        def writer(n):
            try:
                memory_store.compare_and_set("/plugin_configs/1", {"plugins": {}, "n": n}, rev)
                results.append("ok")
            except CompareFailedError:
                results.append("conflict")

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count("ok") == 1
        assert results.count("conflict") == 7
