import logging

import pytest

from pantry.errors import StoreError


def _add(client, name, quantity=1, expiration=None):
    resp = client.post("/items", json={"name": name, "quantity": quantity, "expiration": expiration})
    assert resp.status_code == 200, resp.text
    return resp.json()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_add_and_read_item(client):
    payload = _add(client, "  Brown Rice ", 2, "2099-12-31")
    assert payload["outcome"] == "success"
    assert payload["message"] == "Item 'brown rice' added successfully"
    assert payload["item"] == {
        "key": "brown rice",
        "name": "Brown rice",
        "quantity": 2,
        "expiration": "2099-12-31",
    }

    resp = client.get("/items/BROWN RICE")
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["quantity"] == 2
    assert body["expired"] is False
    assert body["expires_in"].startswith("expires in")


def test_read_missing_item_is_404(client):
    resp = client.get("/items/unicorn")
    assert resp.status_code == 404


def test_list_filters_by_query(client):
    _add(client, "whole milk")
    _add(client, "oat milk")
    _add(client, "bread")

    resp = client.get("/items", params={"q": "MILK"})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["query"] == "MILK"
    assert body["count"] == 2
    assert [item["key"] for item in body["items"]] == ["oat milk", "whole milk"]

    assert client.get("/items").json()["count"] == 3


def test_remove_one(client):
    _add(client, "eggs", 2)
    resp = client.post("/items/eggs/remove")
    assert resp.status_code == 200
    assert resp.json()["item"]["quantity"] == 1

    resp = client.post("/items/eggs/remove")
    assert resp.status_code == 200
    assert resp.json()["deleted"] is True

    resp = client.post("/items/eggs/remove")
    assert resp.status_code == 404
    detail = resp.json()["detail"]
    assert detail["outcome"] == "notFound"
    assert detail["message"] == "Item 'eggs' not found"


def test_set_quantity_and_delete_via_zero(client):
    _add(client, "flour", 3)
    resp = client.put("/items/flour", json={"quantity": 8, "expiration": "2099-01-01"})
    assert resp.status_code == 200
    assert resp.json()["item"]["quantity"] == 8

    resp = client.put("/items/flour", json={"quantity": 0})
    assert resp.status_code == 200
    assert resp.json()["deleted"] is True
    assert client.get("/items/flour").status_code == 404


def test_set_quantity_missing_is_404(client):
    resp = client.put("/items/flour", json={"quantity": 2})
    assert resp.status_code == 404


def test_rename(client):
    _add(client, "soda", 4)
    resp = client.post("/items/soda/rename", json={"new_name": "Sparkling Water"})
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["message"] == "Item 'soda' renamed to 'sparkling water'"
    assert body["item"]["quantity"] == 4
    assert client.get("/items/soda").status_code == 404
    assert client.get("/items/sparkling water").json()["quantity"] == 4


def test_delete_item(client):
    _add(client, "jam")
    resp = client.delete("/items/jam")
    assert resp.status_code == 200
    assert resp.json()["deleted"] is True

    resp = client.delete("/items/jam")
    assert resp.status_code == 200
    assert resp.json()["deleted"] is False


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "   ", "quantity": 1},
        {"name": "rice", "quantity": 0},
        {"name": "rice", "quantity": 1, "expiration": "someday"},
    ],
)
def test_invalid_arguments_are_422(client, payload):
    resp = client.post("/items", json=payload)
    assert resp.status_code == 422


def test_events_are_recorded_newest_first(client):
    _add(client, "tea")
    client.post("/items/coffee/remove")

    resp = client.get("/events", params={"limit": 2})
    assert resp.status_code == 200
    events = resp.json()
    assert [event["outcome"] for event in events] == ["notFound", "success"]
    assert events[0]["severity"] == "warning"
    assert events[1]["operation"] == "add_item"


def test_store_failure_is_503(client, monkeypatch):
    store = client.app.state.pantry.store

    def broken(*args):
        raise StoreError("disk on fire")

    monkeypatch.setattr(store, "get", broken)
    resp = client.post("/items", json={"name": "rice"})
    assert resp.status_code == 503
    assert resp.json()["detail"]["outcome"] == "error"

    assert client.get("/items/rice").status_code == 503


def test_partial_rename_returns_lost_record(client, monkeypatch):
    _add(client, "soda", 3, "2099-05-01")
    store = client.app.state.pantry.store

    def broken(*args):
        raise StoreError("disk full")

    monkeypatch.setattr(store, "put", broken)
    resp = client.post("/items/soda/rename", json={"new_name": "pop"})
    assert resp.status_code == 500
    detail = resp.json()["detail"]
    assert detail["new_key"] == "pop"
    assert detail["lost"] == {"key": "soda", "name": "Soda", "quantity": 3, "expiration": "2099-05-01"}

    assert client.get("/items/soda").status_code == 404


def test_metrics_endpoint(client):
    _add(client, "salt")
    resp = client.get("/metrics/")
    assert resp.status_code == 200
    assert "pantry_ledger_operations_total" in resp.text


def test_route_logs_carry_ledger_outcome(client, caplog):
    with caplog.at_level(logging.INFO, logger="pantry_api.http"):
        client.post("/items/caviar/remove")

    (record,) = [r for r in caplog.records if r.name == "pantry_api.http"]
    assert record.levelno == logging.INFO
    assert record.operation == "item_remove"
    assert record.status_code == 404
    assert record.outcome == "notFound"
    assert record.path == "/items/caviar/remove"
