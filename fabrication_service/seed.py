import random
import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from faker import Faker
from sqlalchemy.orm import Session

from shared.core.database import Base, FabricationSessionLocal, fabrication_engine
from fabrication_service.app.crud.inventory import stock_ledger_crud as ledger
from fabrication_service.app.enum.inventory_enum import StockCategory
from fabrication_service.app.enum.production_enum import ServiceType
from fabrication_service.app.enum.sales_enum import LeadPriority, LeadStage, VisitStatus
from fabrication_service.app.models.inventory.bom_templates import ServiceBOMItem, ServiceBOMTemplate
from fabrication_service.app.models.inventory.stock_items import StockItem
from fabrication_service.app.models.sales.leads import Lead
from fabrication_service.app.models.sales.visits import Visit
from fabrication_service.app.models.inventory import stock_movements, stock_reservations  # noqa: F401
from fabrication_service.app.models.production import orders, warranties, work_orders  # noqa: F401
from fabrication_service.app.models.procurement import purchase_orders  # noqa: F401
from fabrication_service.app.models.sales import quotes  # noqa: F401

# Create tables
Base.metadata.create_all(bind=fabrication_engine)

fake = Faker("pt_BR")

DEMO_STOCK = [
    # key, name, category, unit, quantity, min_level, reorder_point, cost_avg, lead_time_days
    ("metalon", "Metalon 30x30 Galv.", StockCategory.METAL, "bar", 45, 20, 30, "85.00", 2),
    ("lambril", "Chapa Lambril 0.65", StockCategory.SHEET, "m2", 120, 50, 60, "45.50", 3),
    ("poly", "Policarbonato Compacto 6mm", StockCategory.POLY, "m2", 15, 10, 15, "350.00", 5),
    ("motor", "Kit Motor Deslizante 1/2HP", StockCategory.AUTOMATION, "un", 3, 2, 4, "450.00", 1),
    ("rack", "Cremalheira Industrial", StockCategory.AUTOMATION, "m", 30, 10, 15, "25.00", 1),
    ("electrode", "Eletrodo 6013", StockCategory.CONSUMABLE, "kg", 10, 5, 8, "35.00", 0),
    ("disc", "Disco Corte 7\"", StockCategory.CONSUMABLE, "un", 50, 20, 30, "8.50", 0),
    ("screw", "Parafuso Autobrocante", StockCategory.FIXING, "cx", 8, 2, 4, "45.00", 1),
]

SLIDING_GATE_BOM = [
    ("metalon", "perimeter * 1.2"),
    ("lambril", "area * 1.1"),
    ("motor", "fixed: 1"),
    ("rack", "width * 1.1"),
    ("disc", "fixed: 4"),
]


def seed_stock(db: Session, org_id: uuid.UUID) -> dict:
    stock = {}
    for key, name, category, unit, quantity, min_level, reorder_point, cost, lead_time in DEMO_STOCK:
        item = StockItem(
            org_id=org_id,
            name=name,
            category=category.value,
            unit=unit,
            sku=f"{category.value[:3]}-{random.randint(1000, 9999)}",
            quantity=0,
            reserved=0,
            min_level=min_level,
            reorder_point=reorder_point,
            lead_time_days=lead_time,
            cost_avg=0,
        )
        db.add(item)
        db.flush()
        # opening balance goes through the ledger so it shows up as an IN movement
        ledger.receive_stock(db, item, Decimal(quantity), cost_unit=Decimal(cost), notes="Seed opening balance")
        stock[key] = item
    return stock


def seed_bom(db: Session, org_id: uuid.UUID, stock: dict):
    template = ServiceBOMTemplate(org_id=org_id, service_type=ServiceType.GATE.value, name="Portão Deslizante Padrão")
    template.items = [
        ServiceBOMItem(
            org_id=org_id,
            stock_item_id=stock[key].id,
            position=position,
            quantity_formula=formula,
            unit=stock[key].unit,
        )
        for position, (key, formula) in enumerate(SLIDING_GATE_BOM)
    ]
    db.add(template)


def seed_pipeline(db: Session, org_id: uuid.UUID, leads_count: int = 5):
    for index in range(leads_count):
        lead = Lead(
            org_id=org_id,
            client_name=fake.name(),
            phone=fake.phone_number(),
            source=random.choice(["Instagram", "Indicação", "Google", "WhatsApp"]),
            service_type=random.choice(list(ServiceType)).value,
            stage=LeadStage.NEW.value,
            priority=random.choice(list(LeadPriority)).value,
            expected_value=round(random.uniform(1500, 25000), 2),
            notes=fake.sentence(),
        )
        db.add(lead)
        db.flush()

        # first lead is a gate job with a finished measuring visit, ready to quote
        if index == 0:
            lead.service_type = ServiceType.GATE.value
            lead.stage = LeadStage.VISIT.value
            db.add(Visit(
                org_id=org_id,
                lead_id=lead.id,
                scheduled_at=datetime.now(timezone.utc) - timedelta(days=1),
                address_override=fake.street_address(),
                status=VisitStatus.COMPLETED.value,
                checklist={"photos": True, "measurements": True},
                measurements={"width": 3.5, "height": 2.2},
            ))


def seed_data(org_id: uuid.UUID = None):
    org_id = org_id or uuid.uuid4()
    db: Session = FabricationSessionLocal()
    try:
        stock = seed_stock(db, org_id)
        seed_bom(db, org_id, stock)
        seed_pipeline(db, org_id)
        db.commit()
        print(f"✅ Database seeded successfully for org {org_id} with stock, BOM template, leads and a visit.")

    except Exception as e:
        db.rollback()
        print("❌ Error seeding data:", e)
        raise
    finally:
        db.close()
    return org_id


if __name__ == "__main__":
    seed_data()
