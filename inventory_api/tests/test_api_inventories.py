from __future__ import annotations

from inventory_api.db import get_conn
from inventory_api.domain.errors import InternalError


def _payload(i: int = 1) -> dict:
    return {
        "name": f"Chair {i}",
        "description": "Oak chair",
        "fullPriceTHB": 2500 + i,
        "count": 10 + i,
        "manufacturerId": 7,
    }


def _create(client, i: int = 1) -> int:
    res = client.post("/inventories", json=_payload(i))
    assert res.status_code == 200, res.text
    return res.json()["id"]


def test_create_and_get_by_id(client):
    new_id = _create(client)

    res = client.get(f"/inventories/{new_id}")
    assert res.status_code == 200
    body = res.json()
    assert body["id"] == new_id
    for k, v in _payload().items():
        assert body[k] == v
    assert body["createdAt"] == body["updatedAt"]


def test_get_missing_returns_404(client):
    res = client.get("/inventories/424242")
    assert res.status_code == 404
    assert "inventory not found" in res.json()["error"]


def test_list_with_cursor_and_limit(client):
    ids = [_create(client, i) for i in range(1, 6)]

    res = client.get("/inventories", params={"limit": 2})
    assert res.status_code == 200
    page = res.json()
    assert [it["id"] for it in page["inventories"]] == ids[0:2]
    assert page["cursor"] == ids[1]

    page = client.get("/inventories", params={"cursor": page["cursor"], "limit": 2}).json()
    assert [it["id"] for it in page["inventories"]] == ids[2:4]

    page = client.get("/inventories", params={"cursor": page["cursor"], "limit": 2}).json()
    assert [it["id"] for it in page["inventories"]] == ids[4:5]

    page = client.get("/inventories", params={"cursor": page["cursor"], "limit": 2}).json()
    assert page == {"inventories": [], "cursor": 0}


def test_list_rejects_bad_query(client):
    res = client.get("/inventories", params={"cursor": "abc"})
    assert res.status_code == 400
    assert "error" in res.json()

    res = client.get("/inventories", params={"limit": -1})
    assert res.status_code == 400


def test_patch_updates_fields_and_returns_204(client):
    new_id = _create(client)
    res = client.patch(f"/inventories/{new_id}", json={"count": 0, "fullPriceTHB": 100, "name": None})
    assert res.status_code == 204
    assert res.content == b""

    body = client.get(f"/inventories/{new_id}").json()
    assert body["count"] == 0
    assert body["fullPriceTHB"] == 100
    assert body["name"] == "Chair 1"


def test_patch_missing_returns_404(client):
    res = client.patch("/inventories/999", json={"count": 1})
    assert res.status_code == 404
    assert res.json()["error"] == "unable to update inventory: inventory not found"

    res = client.patch("/inventories/999", json={})
    assert res.status_code == 404


def test_patch_empty_body_on_existing_is_204(client):
    new_id = _create(client)
    res = client.patch(f"/inventories/{new_id}", json={})
    assert res.status_code == 204


def test_patch_rejects_invalid_json_and_id(client):
    new_id = _create(client)
    res = client.patch(
        f"/inventories/{new_id}",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400

    res = client.patch("/inventories/abc", json={"count": 1})
    assert res.status_code == 400

    res = client.patch(f"/inventories/{new_id}", json={"count": -5})
    assert res.status_code == 400


def test_delete_twice_is_204(client):
    new_id = _create(client)
    assert client.delete(f"/inventories/{new_id}").status_code == 204
    assert client.delete(f"/inventories/{new_id}").status_code == 204
    assert client.get(f"/inventories/{new_id}").status_code == 404


def test_internal_error_hides_detail(client, monkeypatch):
    def broken(flt):
        raise InternalError("internal server error, unable to query inventories: database is locked")

    monkeypatch.setattr("inventory_api.routes.inventories.get_inventories", broken)
    res = client.get("/inventories")
    assert res.status_code == 500
    assert res.json() == {"error": "internal server error"}


def test_mutations_write_operation_log(client):
    new_id = _create(client)
    client.patch(f"/inventories/{new_id}", json={"count": 3})
    client.patch("/inventories/31337", json={"count": 3})
    client.delete(f"/inventories/{new_id}")

    with get_conn() as conn:
        rows = conn.execute(
            "SELECT action, entity_id, result FROM operation_log ORDER BY id"
        ).fetchall()
    got = [(r["action"], r["entity_id"], r["result"]) for r in rows]
    assert got == [
        ("INVENTORY_CREATE", str(new_id), "OK"),
        ("INVENTORY_UPDATE", str(new_id), "OK"),
        ("INVENTORY_UPDATE", "31337", "ERROR"),
        ("INVENTORY_DELETE", str(new_id), "OK"),
    ]

    res = client.get("/api/logs/search", params={"action": "INVENTORY_UPDATE"})
    assert res.status_code == 200
    assert res.json()["total"] == 2



def test_broken_store_still_returns_json_500(client, tmp_path, monkeypatch):
    bad = tmp_path / "corrupt.db"
    bad.write_bytes(b"definitely not an sqlite file\n" * 64)
    monkeypatch.setenv("INVENTORY_DB_PATH", str(bad))

    responses = [
        client.post("/inventories", json=_payload()),
        client.patch("/inventories/1", json={"count": 1}),
        client.patch("/inventories/1", json={}),
        client.delete("/inventories/1"),
        client.get("/inventories"),
        client.get("/inventories/1"),
    ]
    for res in responses:
        assert res.status_code == 500
        assert res.headers["content-type"].startswith("application/json")
        assert res.json() == {"error": "internal server error"}


def test_operation_log_failure_does_not_fail_committed_write(client, monkeypatch):
    def broken_write(self, result="OK", err=None):
        raise RuntimeError("operation_log unavailable")

    monkeypatch.setattr("inventory_api.logs.LogContext.write", broken_write)

    new_id = _create(client)
    assert client.get(f"/inventories/{new_id}").status_code == 200
    assert client.patch(f"/inventories/{new_id}", json={"count": 2}).status_code == 204
    assert client.delete(f"/inventories/{new_id}").status_code == 204

    res = client.patch("/inventories/31337", json={"count": 1})
    assert res.status_code == 404
    assert res.json()["error"] == "unable to update inventory: inventory not found"


def test_logs_search_filters(client):
    new_id = _create(client)
    client.patch(f"/inventories/{new_id}", json={"name": "Stool"})
    client.patch("/inventories/31337", json={"count": 3})

    body = client.get("/api/logs/search", params={"result": "ERROR"}).json()
    assert body["total"] == 1
    assert body["items"][0]["entity_id"] == "31337"

    body = client.get("/api/logs/search", params={"entity_id": str(new_id)}).json()
    assert [it["action"] for it in body["items"]] == ["INVENTORY_UPDATE", "INVENTORY_CREATE"]

    body = client.get("/api/logs/search", params={"query": "Stool"}).json()
    assert body["total"] == 1
    assert body["items"][0]["action"] == "INVENTORY_UPDATE"

    body = client.get("/api/logs/search", params={"page": 2, "size": 2}).json()
    assert body["total"] == 3
    assert len(body["items"]) == 1
