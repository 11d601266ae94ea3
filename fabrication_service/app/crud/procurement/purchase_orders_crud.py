# app/crud/procurement/purchase_orders_crud.py
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from shared.core.schemas import Lookup, UserToken
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ...enum.inventory_enum import PurchaseOrderStatus
from ...models.inventory.stock_items import StockItem
from ...models.procurement.purchase_orders import PurchaseOrder, PurchaseOrderLine
from ...schemas.procurement.purchase_orders_schemas import (
    PurchaseOrderCreate,
    PurchaseOrderLineOut,
    PurchaseOrderListResponse,
    PurchaseOrderOut,
    PurchaseOrderRequest,
)
from ..inventory import stock_ledger_crud as ledger
from ..inventory.bom_formula import to_decimal
from ..inventory.stock_items_crud import get_purchase_suggestions

logger = logging.getLogger(__name__)


def to_purchase_order_out(po: PurchaseOrder) -> PurchaseOrderOut:
    return PurchaseOrderOut.model_validate({
        **po.__dict__,
        "lines": [
            PurchaseOrderLineOut(
                id=line.id,
                stock_item_id=line.stock_item_id,
                stock_item_name=line.stock_item.name if line.stock_item else None,
                unit=line.stock_item.unit if line.stock_item else None,
                quantity=line.quantity,
                unit_cost_estimated=line.unit_cost_estimated,
            )
            for line in po.lines
        ],
    })


def get_purchase_orders(db: Session, org_id: UUID, params: PurchaseOrderRequest) -> PurchaseOrderListResponse:
    base_query = (
        db.query(PurchaseOrder)
        .options(selectinload(PurchaseOrder.lines).selectinload(PurchaseOrderLine.stock_item))
        .filter(PurchaseOrder.org_id == org_id)
    )

    if params.status and params.status.lower() != "all":
        base_query = base_query.filter(func.upper(PurchaseOrder.status) == params.status.upper())

    if params.search:
        base_query = base_query.filter(PurchaseOrder.supplier_name.ilike(f"%{params.search}%"))

    total = base_query.count()
    purchase_orders = (
        base_query
        .order_by(PurchaseOrder.created_at.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return PurchaseOrderListResponse(
        purchase_orders=[to_purchase_order_out(po) for po in purchase_orders],
        total=total
    )


def get_purchase_order_by_id(db: Session, po_id: UUID, org_id: UUID) -> Optional[PurchaseOrder]:
    return db.query(PurchaseOrder).filter(PurchaseOrder.id == po_id, PurchaseOrder.org_id == org_id).first()


def create_purchase_order(db: Session, purchase_order: PurchaseOrderCreate, org_id: UUID) -> PurchaseOrderOut:
    if purchase_order.from_suggestions:
        suggestions = get_purchase_suggestions(db, org_id)
        if not suggestions:
            return error_response(
                message="No stock item is below its reorder point",
                status_code=AppStatusCode.INVALID_INPUT,
                http_status=400
            )
        stock = {
            item.id: item for item in db.query(StockItem).filter(
                StockItem.org_id == org_id,
                StockItem.id.in_({s.item_id for s in suggestions})
            )
        }
        wanted = [
            (s.item_id, s.suggested_buy, to_decimal(stock[s.item_id].cost_avg) if s.item_id in stock else None)
            for s in suggestions
        ]
    else:
        wanted = [
            (line.stock_item_id, to_decimal(line.quantity),
             to_decimal(line.unit_cost_estimated) if line.unit_cost_estimated is not None else None)
            for line in purchase_order.lines
        ]
        ids = {stock_item_id for stock_item_id, _, _ in wanted}
        found = {
            row.id for row in db.query(StockItem.id).filter(
                StockItem.org_id == org_id,
                StockItem.id.in_(ids),
                StockItem.is_deleted == False
            )
        }
        missing = ids - found
        if missing:
            return error_response(
                message=f"Unknown stock item(s): {', '.join(sorted(str(m) for m in missing))}",
                status_code=AppStatusCode.INVALID_INPUT,
                http_status=400
            )

    total = sum((quantity * cost for _, quantity, cost in wanted if cost is not None), Decimal("0"))
    db_po = PurchaseOrder(
        org_id=org_id,
        supplier_name=purchase_order.supplier_name,
        status=PurchaseOrderStatus.DRAFT.value,
        expected_delivery_date=purchase_order.expected_delivery_date,
        notes=purchase_order.notes,
        total_estimated=total.quantize(Decimal("0.01")),
    )
    db_po.lines = [
        PurchaseOrderLine(org_id=org_id, stock_item_id=stock_item_id, quantity=quantity, unit_cost_estimated=cost)
        for stock_item_id, quantity, cost in wanted
    ]
    db.add(db_po)
    db.commit()
    db.refresh(db_po)
    return to_purchase_order_out(db_po)


def mark_purchase_order_sent(db: Session, po_id: UUID, org_id: UUID) -> PurchaseOrderOut:
    db_po = get_purchase_order_by_id(db, po_id, org_id)
    if not db_po:
        return not_found_response("Purchase order")

    if db_po.status != PurchaseOrderStatus.DRAFT.value:
        return error_response(
            message=f"Purchase order is {db_po.status}, only drafts can be sent",
            status_code=AppStatusCode.INVALID_STATE_TRANSITION,
            http_status=400
        )

    db_po.status = PurchaseOrderStatus.SENT.value
    db.commit()
    db.refresh(db_po)
    return to_purchase_order_out(db_po)


# ----------------- Receive -----------------
def receive_purchase_order(db: Session, po_id: UUID, current_user: UserToken) -> PurchaseOrderOut:
    """Book every line into stock: IN movement, on-hand increment, new average cost."""
    org_id = current_user.org_id
    db_po = get_purchase_order_by_id(db, po_id, org_id)
    if not db_po:
        return not_found_response("Purchase order")

    if db_po.status in (PurchaseOrderStatus.RECEIVED.value, PurchaseOrderStatus.CANCELLED.value):
        return error_response(
            message=f"Purchase order is already {db_po.status}",
            status_code=AppStatusCode.INVALID_STATE_TRANSITION,
            http_status=400
        )

    try:
        items = ledger.lock_stock_items(db, org_id, [line.stock_item_id for line in db_po.lines])
        for line in db_po.lines:
            item = items.get(line.stock_item_id)
            if item is None:
                logger.warning("Purchase order %s: stock item %s no longer exists, line skipped",
                               db_po.id, line.stock_item_id)
                continue

            cost = to_decimal(line.unit_cost_estimated) if line.unit_cost_estimated is not None else None
            ledger.receive_stock(db, item, to_decimal(line.quantity), cost_unit=cost, purchase_id=db_po.id,
                                 notes=f"PO {db_po.supplier_name}", user_id=current_user.user_id)

        db_po.status = PurchaseOrderStatus.RECEIVED.value
        db_po.received_at = datetime.now(timezone.utc)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Receipt of purchase order %s failed, rolled back", po_id)
        raise

    db.refresh(db_po)
    return to_purchase_order_out(db_po)


def cancel_purchase_order(db: Session, po_id: UUID, org_id: UUID) -> PurchaseOrderOut:
    db_po = get_purchase_order_by_id(db, po_id, org_id)
    if not db_po:
        return not_found_response("Purchase order")

    if db_po.status == PurchaseOrderStatus.RECEIVED.value:
        return error_response(
            message="Received purchase orders cannot be cancelled",
            status_code=AppStatusCode.INVALID_STATE_TRANSITION,
            http_status=400
        )

    db_po.status = PurchaseOrderStatus.CANCELLED.value
    db.commit()
    db.refresh(db_po)
    return to_purchase_order_out(db_po)


def purchase_order_status_lookup():
    return [Lookup(id=status.value, name=status.name.capitalize()) for status in PurchaseOrderStatus]
