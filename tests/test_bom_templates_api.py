import pytest


@pytest.fixture
def sheet(client):
    return client.post("/api/stock-items/", json={
        "name": "Chapa Lambril 0.65", "category": "CHAPA", "unit": "m2",
        "quantity": 5, "min_level": 50, "reorder_point": 60,
    }).json()["data"]


def test_invalid_formula_is_rejected_at_save(client, sheet):
    resp = client.post("/api/bom-templates/", json={
        "service_type": "PORTAO",
        "name": "Portão Deslizante Padrão",
        "items": [{"stock_item_id": sheet["id"], "quantity_formula": "two sheets"}],
    })
    assert resp.status_code == 422
    assert resp.json()["status"] == "Failure"


def test_unknown_stock_item_is_rejected(client):
    resp = client.post("/api/bom-templates/", json={
        "service_type": "PORTAO",
        "name": "Portão",
        "items": [{"stock_item_id": "00000000-0000-0000-0000-000000000001", "quantity_formula": "fixed: 1"}],
    })
    assert resp.status_code == 400


def test_create_and_calculate(client, sheet):
    resp = client.post("/api/bom-templates/", json={
        "service_type": "PORTAO",
        "name": "Portão Deslizante Padrão",
        "items": [
            {"stock_item_id": sheet["id"], "quantity_formula": "area * 1.1"},
            {"stock_item_id": sheet["id"], "quantity_formula": "fixed: 2"},
        ],
    })
    assert resp.status_code == 200
    template = resp.json()["data"]
    assert [i["position"] for i in template["items"]] == [0, 1]

    calc = client.post(f"/api/bom-templates/{template['id']}/calculate",
                       json={"width": 3.5, "height": 2.4}).json()["data"]
    first, second = calc["requirements"]
    assert first["quantity"] == 9.24
    assert first["stock_item_name"] == "Chapa Lambril 0.65"
    assert first["available"] == 5
    assert first["shortfall"] == 4.24
    assert second["quantity"] == 2
    assert second["shortfall"] == 0


def test_update_replaces_lines_and_delete(client, sheet):
    template = client.post("/api/bom-templates/", json={
        "service_type": "POLICARBONATO",
        "name": "Cobertura",
        "items": [{"stock_item_id": sheet["id"], "quantity_formula": "area"}],
    }).json()["data"]

    resp = client.put("/api/bom-templates/", json={
        "id": template["id"],
        "items": [{"stock_item_id": sheet["id"], "quantity_formula": "perimetro * 1.2"}],
    })
    assert resp.status_code == 200
    items = resp.json()["data"]["items"]
    assert len(items) == 1
    assert items[0]["quantity_formula"] == "perimetro * 1.2"

    listed = client.get("/api/bom-templates/all", params={"service_type": "POLICARBONATO"}).json()["data"]
    assert len(listed) == 1

    assert client.delete(f"/api/bom-templates/{template['id']}").status_code == 200
    assert client.get(f"/api/bom-templates/{template['id']}").status_code == 404


@pytest.fixture
def gate_template(client, sheet):
    return client.post("/api/bom-templates/", json={
        "service_type": "PORTAO",
        "name": "Portão Deslizante Padrão",
        "items": [{"stock_item_id": sheet["id"], "quantity_formula": "area * 1.1"}],
    }).json()["data"]


@pytest.mark.parametrize("body", [
    '{"width": 1e20, "height": 1e10}',
    '{"width": Infinity, "height": 2}',
    '{"width": 3, "height": -Infinity}',
    '{"width": NaN, "height": 2}',
    '{"area": Infinity}',
])
def test_calculate_rejects_unstorable_measurements(client, gate_template, body):
    resp = client.post(f"/api/bom-templates/{gate_template['id']}/calculate",
                       content=body, headers={"Content-Type": "application/json"})
    assert resp.status_code == 422
    assert resp.json()["status"] == "Failure"


def test_calculate_clamps_oversized_products(client, gate_template):
    resp = client.post(f"/api/bom-templates/{gate_template['id']}/calculate",
                       json={"width": 90000000000, "height": 90000000000})
    assert resp.status_code == 200
    assert resp.json()["data"]["requirements"][0]["quantity"] == 99999999999.99


def test_amount_too_large_to_store_is_rejected_at_save(client, sheet):
    resp = client.post("/api/bom-templates/", json={
        "service_type": "PORTAO",
        "name": "Portão",
        "items": [{"stock_item_id": sheet["id"], "quantity_formula": "fixed: 99999999999999999999999999999"}],
    })
    assert resp.status_code == 422
