import pytest


@pytest.fixture
def metalon(client):
    resp = client.post("/api/stock-items/", json={
        "name": "Metalon 30x30 Galv.",
        "category": "METAL",
        "unit": "bar",
        "quantity": 45,
        "min_level": 20,
        "reorder_point": 30,
        "cost_avg": 85,
        "lead_time_days": 2,
    })
    assert resp.status_code == 200
    return resp.json()["data"]


def test_create_stock_item_books_opening_balance(client, metalon):
    assert metalon["quantity"] == 45
    assert metalon["reserved"] == 0
    assert metalon["available"] == 45
    assert metalon["health"] == "OK"

    movements = client.get(f"/api/stock-items/{metalon['id']}/movements").json()["data"]
    assert [m["type"] for m in movements] == ["IN"]
    assert movements[0]["quantity"] == 45


def test_list_and_filter_stock_items(client, metalon):
    body = client.get("/api/stock-items/all").json()
    assert body["status"] == "Success"
    assert body["data"]["total"] == 1
    assert body["data"]["items"][0]["name"] == "Metalon 30x30 Galv."

    critical = client.get("/api/stock-items/all", params={"health": "CRITICAL"}).json()["data"]
    assert critical["total"] == 0

    searched = client.get("/api/stock-items/all", params={"search": "metal"}).json()["data"]
    assert searched["total"] == 1


def test_manual_in_updates_average_cost(client, metalon):
    resp = client.post(f"/api/stock-items/{metalon['id']}/movements",
                       json={"type": "IN", "quantity": 10, "cost_unit": 95})
    assert resp.status_code == 200

    item = client.get(f"/api/stock-items/{metalon['id']}").json()["data"]
    assert item["quantity"] == 55
    assert item["cost_avg"] == 86.82


def test_manual_out_cannot_exceed_on_hand(client, metalon):
    resp = client.post(f"/api/stock-items/{metalon['id']}/movements", json={"type": "OUT", "quantity": 50})
    assert resp.status_code == 400
    assert resp.json()["status"] == "Failure"

    resp = client.post(f"/api/stock-items/{metalon['id']}/movements", json={"type": "OUT", "quantity": 5})
    assert resp.status_code == 200
    assert client.get(f"/api/stock-items/{metalon['id']}").json()["data"]["quantity"] == 40


def test_reservation_movements_are_not_manual(client, metalon):
    resp = client.post(f"/api/stock-items/{metalon['id']}/movements", json={"type": "RESERVE", "quantity": 1})
    assert resp.status_code == 400


def test_adjust_sets_counted_quantity(client, metalon):
    resp = client.post(f"/api/stock-items/{metalon['id']}/movements", json={"type": "ADJUST", "quantity": 12})
    assert resp.status_code == 200

    item = client.get(f"/api/stock-items/{metalon['id']}").json()["data"]
    assert item["quantity"] == 12
    assert item["health"] == "LOW"


def test_delete_refused_while_stock_on_hand(client, metalon):
    resp = client.delete(f"/api/stock-items/{metalon['id']}")
    assert resp.status_code == 400
    assert resp.json()["status_code"] == "400"

    client.post(f"/api/stock-items/{metalon['id']}/movements", json={"type": "ADJUST", "quantity": 0})
    assert client.delete(f"/api/stock-items/{metalon['id']}").status_code == 200
    assert client.get(f"/api/stock-items/{metalon['id']}").status_code == 404


def test_update_does_not_touch_counters(client, metalon):
    resp = client.put("/api/stock-items/", json={"id": metalon["id"], "location": "Rack B", "min_level": 50})
    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["location"] == "Rack B"
    assert data["quantity"] == 45
    assert data["health"] == "LOW"


def test_purchase_suggestions(client, metalon):
    client.post(f"/api/stock-items/{metalon['id']}/movements", json={"type": "ADJUST", "quantity": 5})

    suggestions = client.get("/api/stock-items/purchase-suggestions").json()["data"]
    assert len(suggestions) == 1
    assert suggestions[0]["item_id"] == metalon["id"]
    assert suggestions[0]["suggested_buy"] == 55


def test_lookups(client):
    health = client.get("/api/stock-items/health-lookup").json()["data"]
    assert {h["id"] for h in health} == {"OK", "LOW", "CRITICAL"}

    categories = client.get("/api/stock-items/category-lookup").json()["data"]
    assert "CHAPA" in {c["id"] for c in categories}


@pytest.mark.parametrize("movement_type", ["IN", "OUT"])
def test_zero_quantity_in_and_out_are_rejected(client, metalon, movement_type):
    resp = client.post(f"/api/stock-items/{metalon['id']}/movements",
                       json={"type": movement_type, "quantity": 0})
    assert resp.status_code == 422
    assert resp.json()["status"] == "Failure"

    movements = client.get(f"/api/stock-items/{metalon['id']}/movements").json()["data"]
    assert [m["type"] for m in movements] == ["IN"]


@pytest.mark.parametrize("body", [
    '{"type": "IN", "quantity": Infinity}',
    '{"type": "IN", "quantity": 1, "cost_unit": NaN}',
    '{"type": "ADJUST", "quantity": 1e20}',
])
def test_unstorable_movement_quantities_are_rejected(client, metalon, body):
    resp = client.post(f"/api/stock-items/{metalon['id']}/movements",
                       content=body, headers={"Content-Type": "application/json"})
    assert resp.status_code == 422
    assert client.get(f"/api/stock-items/{metalon['id']}").json()["data"]["quantity"] == 45


def test_manual_movement_locks_the_stock_row(client, metalon, monkeypatch):
    from fabrication_service.app.crud.inventory import stock_ledger_crud

    locked = []
    lock_stock_items = stock_ledger_crud.lock_stock_items

    def recording_lock(db, org_id, item_ids):
        item_ids = list(item_ids)
        locked.extend(str(i) for i in item_ids)
        return lock_stock_items(db, org_id, item_ids)

    monkeypatch.setattr(stock_ledger_crud, "lock_stock_items", recording_lock)

    resp = client.post(f"/api/stock-items/{metalon['id']}/movements", json={"type": "OUT", "quantity": 5})
    assert resp.status_code == 200
    assert locked == [metalon["id"]]


def test_movement_on_unknown_item_is_not_found(client):
    resp = client.post("/api/stock-items/00000000-0000-0000-0000-000000000001/movements",
                       json={"type": "IN", "quantity": 1})
    assert resp.status_code == 404
