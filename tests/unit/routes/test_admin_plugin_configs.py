"""Tests for the admin plugin config routes."""
import json

import pytest

BASE = "/apisix/admin/plugin_configs"

LIMIT_COUNT = {"limit-count": {"count": 2, "time_window": 60, "rejected_code": 503}}


@pytest.fixture
def store(app):
    return app.container.kv_store()


def _put(client, resource_id, body):
    return client.put(f"{BASE}/{resource_id}", json=body)


class TestPutRoute:
    """Tests for PUT /apisix/admin/plugin_configs."""

    def test_put_creates(self, client):
        response = _put(client, "1", {"plugins": LIMIT_COUNT, "desc": "rate limit"})

        assert response.status_code == 201
        assert response.json["node"]["value"]["id"] == "1"
        assert response.json["node"]["key"] == "/plugin_configs/1"

    def test_put_replaces(self, client):
        _put(client, "1", {"plugins": LIMIT_COUNT})

        response = _put(client, "1", {"plugins": {}})

        assert response.status_code == 200
        assert response.json["node"]["value"]["plugins"] == {}

    def test_put_without_path_id_uses_body_id(self, client):
        response = client.put(BASE, json={"id": "abc", "plugins": {}})

        assert response.status_code == 201
        assert response.json["node"]["key"] == "/plugin_configs/abc"

    def test_put_id_mismatch(self, client):
        response = _put(client, "1", {"id": "2", "plugins": {}})

        assert response.status_code == 400
        assert response.json == {"error_msg": "wrong id"}

    def test_put_without_body(self, client):
        response = client.put(f"{BASE}/1")

        assert response.status_code == 400
        assert response.json == {"error_msg": "missing configurations"}

    def test_put_invalid_json(self, client):
        response = client.put(
            f"{BASE}/1", data="{not json", content_type="application/json"
        )

        assert response.status_code == 400

    def test_put_unknown_plugin(self, client):
        response = _put(client, "1", {"plugins": {"no-such-plugin": {}}})

        assert response.status_code == 400
        assert response.json["error_msg"] == "unknown plugin [no-such-plugin]"

    def test_put_invalid_plugin_settings(self, client):
        response = _put(client, "1", {"plugins": {"limit-count": {"count": 2}}})

        assert response.status_code == 400
        assert "limit-count" in response.json["error_msg"]


class TestPostRoute:
    """Tests for POST /apisix/admin/plugin_configs."""

    def test_post_assigns_id(self, client):
        response = client.post(BASE, json={"plugins": {}})

        assert response.status_code == 201
        assert len(response.json["node"]["value"]["id"]) == 20

    def test_post_rejects_id(self, client):
        response = client.post(BASE, json={"id": "1", "plugins": {}})

        assert response.status_code == 400
        assert response.json["error_msg"] == "wrong id, do not need it"


class TestGetRoute:
    """Tests for GET /apisix/admin/plugin_configs."""

    def test_get_one(self, client):
        _put(client, "1", {"plugins": LIMIT_COUNT})

        response = client.get(f"{BASE}/1")

        assert response.status_code == 200
        assert response.json["value"]["plugins"] == LIMIT_COUNT

    def test_get_one_v2_header(self, client):
        _put(client, "1", {"plugins": {}})

        response = client.get(f"{BASE}/1", headers={"X-API-VERSION": "v2"})

        assert response.json["node"]["value"]["id"] == "1"

    def test_get_missing(self, client):
        response = client.get(f"{BASE}/nope")

        assert response.status_code == 404
        assert response.json["message"] == "Key not found"

    def test_list_with_pagination(self, client):
        for i in range(1, 4):
            _put(client, str(i), {"plugins": {}, "labels": {"team": "a" if i < 3 else "b"}})

        response = client.get(f"{BASE}?page=1&page_size=2&label=team:a")

        assert response.status_code == 200
        assert response.json["total"] == 2
        assert len(response.json["list"]) == 2


class TestPatchRoute:
    """Tests for PATCH /apisix/admin/plugin_configs/<id>[/<sub_path>]."""

    def test_merge_patch(self, client):
        _put(client, "1", {"plugins": LIMIT_COUNT})

        response = client.patch(
            f"{BASE}/1", json={"plugins": {"limit-count": {"count": 5}}}
        )

        assert response.status_code == 200
        plugin = response.json["node"]["value"]["plugins"]["limit-count"]
        assert plugin["count"] == 5
        assert plugin["time_window"] == 60

    def test_sub_path_patch(self, client):
        _put(client, "1", {"plugins": LIMIT_COUNT})

        response = client.patch(
            f"{BASE}/1/plugins/limit-count", json={"rejected_code": 429}
        )

        assert response.status_code == 200
        plugin = response.json["node"]["value"]["plugins"]["limit-count"]
        assert plugin["rejected_code"] == 429
        assert plugin["count"] == 2

    def test_sub_path_scalar_body(self, client):
        _put(client, "1", {"plugins": {}, "desc": "old"})

        response = client.patch(
            f"{BASE}/1/desc", data=json.dumps("new"), content_type="application/json"
        )

        assert response.status_code == 200
        assert response.json["node"]["value"]["desc"] == "new"

    def test_invalid_sub_path(self, client):
        _put(client, "1", {"plugins": LIMIT_COUNT})

        response = client.patch(f"{BASE}/1/plugins/nonexistent/deep", json={"a": 1})

        assert response.status_code == 400
        assert "invalid sub-path" in response.json["error_msg"]

    def test_patch_missing(self, client):
        response = client.patch(f"{BASE}/404", json={"desc": "x"})

        assert response.status_code == 404

    def test_patch_without_body(self, client):
        _put(client, "1", {"plugins": {}})

        response = client.patch(f"{BASE}/1")

        assert response.status_code == 400
        assert response.json["error_msg"] == "missing new configuration"


class TestDeleteRoute:
    """Tests for DELETE /apisix/admin/plugin_configs/<id>."""

    def test_delete(self, client):
        _put(client, "1", {"plugins": {}})

        response = client.delete(f"{BASE}/1")

        assert response.status_code == 200
        assert response.json["deleted"] == "1"

    def test_delete_referenced_by_route(self, client, store):
        _put(client, "1", {"plugins": {}})
        store.set("/routes/r1", {"id": "r1", "uri": "/api/*", "plugin_config_id": "1"})

        response = client.delete(f"{BASE}/1")

        assert response.status_code == 400
        assert response.json["error_msg"] == (
            "can not delete this plugin config, route [r1] is still using it now"
        )
        assert client.get(f"{BASE}/1").status_code == 200

    def test_delete_missing(self, client):
        response = client.delete(f"{BASE}/1")

        assert response.status_code == 404

    def test_delete_without_id_not_allowed(self, client):
        response = client.delete(BASE)

        assert response.status_code == 405
