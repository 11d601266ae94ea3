# app/crud/inventory/stock_items_crud.py
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from shared.core.schemas import Lookup, UserToken
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ...enum.inventory_enum import StockCategory, StockHealth, StockMovementType
from ...models.inventory.stock_items import StockItem
from ...models.inventory.stock_movements import StockMovement
from ...schemas.inventory.stock_items_schemas import (
    StockItemCreate,
    StockItemListResponse,
    StockItemOut,
    StockItemRequest,
    StockItemUpdate,
    StockMovementCreate,
)
from . import stock_ledger_crud as ledger
from .bom_formula import to_decimal
from .stock_health import generate_purchase_suggestions, get_stock_health


def to_stock_item_out(item: StockItem) -> StockItemOut:
    return StockItemOut.model_validate({
        **item.__dict__,
        "available": item.available,
        "health": get_stock_health(item),
    })


def build_stock_items_filters(org_id: UUID, params: StockItemRequest):
    filters = [
        StockItem.org_id == org_id,
        StockItem.is_deleted == False
    ]
    available = StockItem.quantity - StockItem.reserved

    if params.category and params.category.lower() != "all":
        filters.append(func.upper(StockItem.category) == params.category.upper())

    if params.active_only:
        filters.append(StockItem.active == True)

    if params.health and params.health.lower() != "all":
        health = params.health.upper()
        if health == StockHealth.CRITICAL.value:
            filters.append(available <= 0)
        elif health == StockHealth.LOW.value:
            filters.append(and_(available > 0, available <= StockItem.min_level))
        elif health == StockHealth.OK.value:
            filters.append(and_(available > 0, available > StockItem.min_level))

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(StockItem.name.ilike(search_term), StockItem.sku.ilike(search_term)))

    return filters


def get_stock_items(db: Session, org_id: UUID, params: StockItemRequest) -> StockItemListResponse:
    base_query = db.query(StockItem).filter(*build_stock_items_filters(org_id, params))
    total = base_query.count()

    items = (
        base_query
        .order_by(StockItem.name)
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return StockItemListResponse(items=[to_stock_item_out(i) for i in items], total=total)


def get_stock_item_by_id(db: Session, item_id: UUID, org_id: UUID) -> Optional[StockItem]:
    # ✅ Filter by org_id and exclude deleted items
    return db.query(StockItem).filter(
        StockItem.id == item_id,
        StockItem.org_id == org_id,
        StockItem.is_deleted == False
    ).first()


def get_stock_item_or_404(db: Session, item_id: UUID, org_id: UUID) -> StockItem:
    item = get_stock_item_by_id(db, item_id, org_id)
    if not item:
        return not_found_response("Stock item")
    return item


def create_stock_item(db: Session, item: StockItemCreate, current_user: UserToken) -> StockItemOut:
    item_data = item.model_dump(exclude={"quantity"})
    item_data["org_id"] = current_user.org_id  # org always comes from the token
    item_data["category"] = item.category.value

    db_item = StockItem(**item_data, quantity=0, reserved=0)
    db.add(db_item)
    db.flush()

    opening = to_decimal(item.quantity)
    if opening > 0:
        ledger.receive_stock(db, db_item, opening, notes="Opening balance", user_id=current_user.user_id)

    db.commit()
    db.refresh(db_item)
    return to_stock_item_out(db_item)


def update_stock_item(db: Session, item: StockItemUpdate, org_id: UUID) -> Optional[StockItemOut]:
    db_item = get_stock_item_by_id(db, item.id, org_id)
    if not db_item:
        return None

    # counters are not part of the update schema, only ledger movements touch them
    for k, v in item.model_dump(exclude_unset=True, exclude={"id"}).items():
        setattr(db_item, k, v.value if hasattr(v, "value") else v)

    db.commit()
    db.refresh(db_item)
    return to_stock_item_out(db_item)


# ----------------- Soft Delete Stock Item -----------------
def delete_stock_item_soft(db: Session, item_id: UUID, org_id: UUID) -> bool:
    """
    Soft delete stock item
    Returns: True if deleted, False if not found
    """
    db_item = get_stock_item_by_id(db, item_id, org_id)
    if not db_item:
        return False

    if to_decimal(db_item.quantity) > 0 or to_decimal(db_item.reserved) > 0:
        return error_response(
            message=f"Cannot delete stock item. It has {db_item.quantity} on hand and {db_item.reserved} reserved.",
            status_code=AppStatusCode.STOCK_ITEM_IN_USE,
            http_status=400
        )

    db_item.is_deleted = True
    db_item.deleted_at = func.now()
    db.commit()
    return True


# ----------------- Movements -----------------
def create_stock_movement(
    db: Session,
    item_id: UUID,
    movement: StockMovementCreate,
    current_user: UserToken
) -> StockMovement:
    db_item = ledger.lock_stock_items(db, current_user.org_id, [item_id]).get(item_id)
    if not db_item:
        return not_found_response("Stock item")
    quantity = to_decimal(movement.quantity)

    if movement.type == StockMovementType.IN:
        cost_unit = to_decimal(movement.cost_unit) if movement.cost_unit is not None else None
        db_movement = ledger.receive_stock(db, db_item, quantity, cost_unit=cost_unit,
                                           notes=movement.notes, user_id=current_user.user_id)
    elif movement.type == StockMovementType.OUT:
        if quantity > to_decimal(db_item.quantity):
            return error_response(
                message=f"Cannot issue {quantity}, only {db_item.quantity} {db_item.unit} on hand",
                status_code=AppStatusCode.INVALID_INPUT,
                http_status=400
            )
        db_movement = ledger.issue_stock(db, db_item, quantity, notes=movement.notes,
                                         user_id=current_user.user_id)
    elif movement.type == StockMovementType.ADJUST:
        db_movement = ledger.adjust_stock(db, db_item, quantity, notes=movement.notes,
                                          user_id=current_user.user_id)
    else:
        # RESERVE / UNRESERVE belong to work orders
        return error_response(
            message=f"{movement.type.value} movements are created by work orders only",
            status_code=AppStatusCode.INVALID_INPUT,
            http_status=400
        )

    db.commit()
    db.refresh(db_movement)
    return db_movement


def get_stock_movements(db: Session, item_id: UUID, org_id: UUID, skip: int = 0, limit: int = 100) -> List[StockMovement]:
    get_stock_item_or_404(db, item_id, org_id)
    return (
        db.query(StockMovement)
        .filter(StockMovement.stock_item_id == item_id, StockMovement.org_id == org_id)
        .order_by(StockMovement.created_at.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


# ----------------- Suggestions & lookups -----------------
def get_purchase_suggestions(db: Session, org_id: UUID):
    stock = db.query(StockItem).filter(
        StockItem.org_id == org_id,
        StockItem.is_deleted == False,
        StockItem.active == True
    ).order_by(StockItem.name).all()
    return generate_purchase_suggestions(stock)


def stock_health_lookup() -> List[Lookup]:
    return [Lookup(id=health.value, name=health.name.capitalize()) for health in StockHealth]


def stock_category_lookup() -> List[Lookup]:
    return [Lookup(id=category.value, name=category.name.capitalize()) for category in StockCategory]
