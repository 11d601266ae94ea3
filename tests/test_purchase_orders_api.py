import pytest


@pytest.fixture
def low_item(client):
    return client.post("/api/stock-items/", json={
        "name": "Kit Motor Deslizante 1/2HP", "category": "AUTOMACAO", "unit": "un",
        "quantity": 3, "min_level": 2, "reorder_point": 4, "cost_avg": 450,
    }).json()["data"]


@pytest.fixture
def healthy_item(client):
    return client.post("/api/stock-items/", json={
        "name": "Disco Corte 7\"", "category": "CONSUMIVEIS", "unit": "un",
        "quantity": 50, "min_level": 20, "reorder_point": 30, "cost_avg": 8.5,
    }).json()["data"]


def test_purchase_order_needs_lines(client):
    resp = client.post("/api/purchase-orders/", json={"supplier_name": "Aço Forte"})
    assert resp.status_code == 422


def test_create_from_suggestions(client, low_item, healthy_item):
    resp = client.post("/api/purchase-orders/", json={"supplier_name": "Aço Forte", "from_suggestions": True})
    assert resp.status_code == 200
    po = resp.json()["data"]

    assert po["status"] == "RASCUNHO"
    assert len(po["lines"]) == 1
    assert po["lines"][0]["stock_item_id"] == low_item["id"]
    assert po["lines"][0]["quantity"] == 5
    assert po["total_estimated"] == 2250


def test_receive_books_stock_once(client, low_item):
    po = client.post("/api/purchase-orders/", json={
        "supplier_name": "Automatiza SP",
        "lines": [{"stock_item_id": low_item["id"], "quantity": 2, "unit_cost_estimated": 480}],
    }).json()["data"]

    assert client.post(f"/api/purchase-orders/{po['id']}/send").json()["data"]["status"] == "ENVIADO"

    resp = client.post(f"/api/purchase-orders/{po['id']}/receive")
    assert resp.status_code == 200
    received = resp.json()["data"]
    assert received["status"] == "RECEBIDO"
    assert received["received_at"] != ""

    item = client.get(f"/api/stock-items/{low_item['id']}").json()["data"]
    assert item["quantity"] == 5
    assert item["cost_avg"] == 462

    movements = client.get(f"/api/stock-items/{low_item['id']}/movements").json()["data"]
    purchase_moves = [m for m in movements if m["related_purchase_id"] == po["id"]]
    assert len(purchase_moves) == 1
    assert purchase_moves[0]["type"] == "IN"

    assert client.post(f"/api/purchase-orders/{po['id']}/receive").status_code == 400
    assert client.get(f"/api/stock-items/{low_item['id']}").json()["data"]["quantity"] == 5


def test_received_purchase_order_cannot_be_cancelled(client, low_item):
    po = client.post("/api/purchase-orders/", json={
        "supplier_name": "Automatiza SP",
        "lines": [{"stock_item_id": low_item["id"], "quantity": 1}],
    }).json()["data"]
    client.post(f"/api/purchase-orders/{po['id']}/receive")

    assert client.post(f"/api/purchase-orders/{po['id']}/cancel").status_code == 400

    listed = client.get("/api/purchase-orders/all", params={"status": "RECEBIDO"}).json()["data"]
    assert listed["total"] == 1
