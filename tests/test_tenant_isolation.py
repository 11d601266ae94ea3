import uuid

import pytest
from fastapi.testclient import TestClient

from fabrication_service.app.main import app
from conftest import auth_headers


@pytest.fixture
def item(client):
    return client.post("/api/stock-items/", json={
        "name": "Eletrodo 6013", "category": "CONSUMIVEIS", "unit": "kg", "quantity": 10,
    }).json()["data"]


def test_other_org_cannot_see_stock(client, item):
    other = auth_headers(uuid.uuid4())

    assert client.get(f"/api/stock-items/{item['id']}", headers=other).status_code == 404
    assert client.get("/api/stock-items/all", headers=other).json()["data"]["total"] == 0
    resp = client.post(f"/api/stock-items/{item['id']}/movements",
                       json={"type": "OUT", "quantity": 1}, headers=other)
    assert resp.status_code == 404

    assert client.get(f"/api/stock-items/{item['id']}").status_code == 200


def test_org_id_comes_from_token(client, org_id, item):
    assert item["org_id"] == str(org_id)


def test_missing_token_is_rejected(client):
    with TestClient(app) as anonymous:
        assert anonymous.get("/api/stock-items/all").status_code in (401, 403)


def test_invalid_token_is_rejected(client):
    resp = client.get("/api/stock-items/all", headers={"Authorization": "Bearer not-a-jwt"})
    assert resp.status_code == 401
    assert resp.json()["status_code"] == "300"


def test_inactive_user_is_rejected(client, org_id):
    resp = client.get("/api/stock-items/all", headers=auth_headers(org_id, status="inactive"))
    assert resp.status_code == 403


def test_health_endpoint(client):
    assert client.get("/health").json()["data"]["status"] == "ok"
