# app/crud/inventory/bom_templates_crud.py
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ...models.inventory.bom_templates import ServiceBOMItem, ServiceBOMTemplate
from ...models.inventory.stock_items import StockItem
from ...schemas.inventory.bom_templates_schemas import (
    BOMCalculationResponse,
    BOMItemCreate,
    BOMRequirementOut,
    BOMTemplateCreate,
    BOMTemplateUpdate,
    Measurements,
)
from .bom_calculator import calculate_bom_requirements
from .bom_formula import to_decimal


def get_bom_templates(db: Session, org_id: UUID, service_type: Optional[str] = None) -> List[ServiceBOMTemplate]:
    query = (
        db.query(ServiceBOMTemplate)
        .options(selectinload(ServiceBOMTemplate.items))
        .filter(ServiceBOMTemplate.org_id == org_id, ServiceBOMTemplate.is_deleted == False)
    )
    if service_type and service_type.lower() != "all":
        query = query.filter(func.upper(ServiceBOMTemplate.service_type) == service_type.upper())
    return query.order_by(ServiceBOMTemplate.name).all()


def get_bom_template_by_id(db: Session, template_id: UUID, org_id: UUID) -> Optional[ServiceBOMTemplate]:
    return db.query(ServiceBOMTemplate).filter(
        ServiceBOMTemplate.id == template_id,
        ServiceBOMTemplate.org_id == org_id,
        ServiceBOMTemplate.is_deleted == False
    ).first()


def _check_stock_items(db: Session, org_id: UUID, items: List[BOMItemCreate]):
    wanted = {i.stock_item_id for i in items}
    if not wanted:
        return

    found = {
        row.id for row in db.query(StockItem.id).filter(
            StockItem.org_id == org_id,
            StockItem.id.in_(wanted),
            StockItem.is_deleted == False
        )
    }
    missing = wanted - found
    if missing:
        return error_response(
            message=f"Unknown stock item(s): {', '.join(sorted(str(m) for m in missing))}",
            status_code=AppStatusCode.INVALID_INPUT,
            http_status=400
        )


def _build_items(org_id: UUID, items: List[BOMItemCreate]) -> List[ServiceBOMItem]:
    return [
        ServiceBOMItem(
            org_id=org_id,
            stock_item_id=item.stock_item_id,
            position=position,
            quantity_formula=item.quantity_formula,
            unit=item.unit,
        )
        for position, item in enumerate(items)
    ]


def create_bom_template(db: Session, template: BOMTemplateCreate, org_id: UUID) -> ServiceBOMTemplate:
    _check_stock_items(db, org_id, template.items)

    db_template = ServiceBOMTemplate(
        org_id=org_id,
        service_type=template.service_type.value,
        name=template.name,
    )
    db_template.items = _build_items(org_id, template.items)
    db.add(db_template)
    db.commit()
    db.refresh(db_template)
    return db_template


def update_bom_template(db: Session, template: BOMTemplateUpdate, org_id: UUID) -> Optional[ServiceBOMTemplate]:
    db_template = get_bom_template_by_id(db, template.id, org_id)
    if not db_template:
        return None

    if template.name is not None:
        db_template.name = template.name
    if template.service_type is not None:
        db_template.service_type = template.service_type.value
    if template.items is not None:
        _check_stock_items(db, org_id, template.items)
        db_template.items = _build_items(org_id, template.items)

    db.commit()
    db.refresh(db_template)
    return db_template


def delete_bom_template_soft(db: Session, template_id: UUID, org_id: UUID) -> bool:
    db_template = get_bom_template_by_id(db, template_id, org_id)
    if not db_template:
        return False

    db_template.is_deleted = True
    db_template.deleted_at = func.now()
    db.commit()
    return True


# ----------------- Requirement preview -----------------
def calculate_template_requirements(
    db: Session,
    template_id: UUID,
    measurements: Measurements,
    org_id: UUID
) -> BOMCalculationResponse:
    db_template = get_bom_template_by_id(db, template_id, org_id)
    if not db_template:
        return not_found_response("BOM template")

    requirements = calculate_bom_requirements(db_template, measurements.as_dict())
    stock = {
        item.id: item for item in db.query(StockItem).filter(
            StockItem.org_id == org_id,
            StockItem.id.in_({r.stock_item_id for r in requirements})
        )
    }

    results = []
    for requirement in requirements:
        item = stock.get(requirement.stock_item_id)
        available = item.available if item else None
        shortfall = max(requirement.quantity - to_decimal(available), 0) if item else requirement.quantity
        results.append(BOMRequirementOut(
            stock_item_id=requirement.stock_item_id,
            stock_item_name=item.name if item else None,
            unit=item.unit if item else None,
            quantity=requirement.quantity,
            available=available,
            shortfall=shortfall,
        ))

    return BOMCalculationResponse(
        template_id=db_template.id,
        service_type=db_template.service_type,
        requirements=results,
    )
