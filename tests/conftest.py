import os
import uuid
from decimal import Decimal

# must be set before the app modules read their settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["WARRANTY_DAYS"] = "365"

import pytest
from fastapi.testclient import TestClient

from shared.core.auth import create_access_token
from shared.core.database import Base, FabricationSessionLocal, fabrication_engine, get_fabrication_db
from shared.core.schemas import UserToken
from fabrication_service.app.main import app
from fabrication_service.app.models.inventory.bom_templates import ServiceBOMItem, ServiceBOMTemplate
from fabrication_service.app.models.inventory.stock_items import StockItem
from fabrication_service.app.models.production.orders import Order
from fabrication_service.app.models.production.work_orders import WorkOrder


def make_token(org_id, user_id="user-1", status="active") -> str:
    return create_access_token({
        "user_id": user_id,
        "org_id": org_id,
        "account_type": "organization",
        "status": status,
    })


def auth_headers(org_id, **kwargs) -> dict:
    return {"Authorization": f"Bearer {make_token(org_id, **kwargs)}"}


@pytest.fixture
def db_session():
    Base.metadata.drop_all(bind=fabrication_engine)
    Base.metadata.create_all(bind=fabrication_engine)
    db = FabricationSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def org_id():
    return uuid.uuid4()


@pytest.fixture
def current_user(org_id):
    return UserToken(user_id="user-1", org_id=org_id, account_type="organization", status="active")


@pytest.fixture
def client(db_session, org_id):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_fabrication_db] = override_get_db
    with TestClient(app) as test_client:
        test_client.headers.update(auth_headers(org_id))
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_stock_item(db_session, org_id):
    def _make(name="Metalon 30x30 Galv.", quantity=0, reserved=0, min_level=0, reorder_point=0,
              cost_avg=0, unit="bar", category="METAL", org=None):
        item = StockItem(
            org_id=org or org_id,
            name=name,
            category=category,
            unit=unit,
            quantity=Decimal(str(quantity)),
            reserved=Decimal(str(reserved)),
            min_level=Decimal(str(min_level)),
            reorder_point=Decimal(str(reorder_point)),
            cost_avg=Decimal(str(cost_avg)),
        )
        db_session.add(item)
        db_session.commit()
        return item
    return _make


@pytest.fixture
def make_template(db_session, org_id):
    def _make(lines, service_type="PORTAO", name="Portão Deslizante Padrão"):
        template = ServiceBOMTemplate(org_id=org_id, service_type=service_type, name=name)
        template.items = [
            ServiceBOMItem(org_id=org_id, stock_item_id=item.id, position=position, quantity_formula=formula)
            for position, (item, formula) in enumerate(lines)
        ]
        db_session.add(template)
        db_session.commit()
        return template
    return _make


@pytest.fixture
def make_work_order(db_session, org_id):
    def _make(service_type="PORTAO", measurements=None, order_number=1000):
        order = Order(org_id=org_id, order_number=order_number, status="EM_PRODUCAO",
                      service_type=service_type, client_name="Escola Futuro")
        db_session.add(order)
        db_session.flush()
        work_order = WorkOrder(org_id=org_id, order_id=order.id, service_type=service_type,
                               status="CUTTING", measurements=measurements)
        db_session.add(work_order)
        db_session.flush()
        return work_order
    return _make
