# app/crud/production/orders_crud.py
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.core.schemas import Lookup, UserToken
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ...enum.production_enum import OrderStatus
from ...models.production.orders import Order
from ...schemas.production.orders_schemas import OrderListResponse, OrderOut, OrderRequest
from ..inventory import stock_ledger_crud as ledger

logger = logging.getLogger(__name__)


def get_orders(db: Session, org_id: UUID, params: OrderRequest) -> OrderListResponse:
    base_query = db.query(Order).filter(Order.org_id == org_id)

    if params.status and params.status.lower() != "all":
        base_query = base_query.filter(func.upper(Order.status) == params.status.upper())

    if params.service_type and params.service_type.lower() != "all":
        base_query = base_query.filter(func.upper(Order.service_type) == params.service_type.upper())

    if params.search:
        search_term = f"%{params.search}%"
        conditions = [Order.client_name.ilike(search_term)]
        if params.search.isdigit():
            conditions.append(Order.order_number == int(params.search))
        base_query = base_query.filter(or_(*conditions))

    total = base_query.count()
    orders = (
        base_query
        .order_by(Order.order_number.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return OrderListResponse(orders=[OrderOut.model_validate(o) for o in orders], total=total)


def get_order_by_id(db: Session, order_id: UUID, org_id: UUID) -> Optional[Order]:
    return db.query(Order).filter(Order.id == order_id, Order.org_id == org_id).first()


# ----------------- Cancel -----------------
def cancel_order(db: Session, order_id: UUID, current_user: UserToken, reason: Optional[str] = None) -> Order:
    """Cancel an order and give back every material still held by its work orders."""
    order = get_order_by_id(db, order_id, current_user.org_id)
    if not order:
        return not_found_response("Order")

    if order.status in (OrderStatus.COMPLETED.value, OrderStatus.CANCELLED.value):
        return error_response(
            message=f"Order {order.order_number} is {order.status} and cannot be cancelled",
            status_code=AppStatusCode.INVALID_STATE_TRANSITION,
            http_status=400
        )

    try:
        released = 0
        for work_order in order.work_orders:
            released += len(ledger.release_work_order_reservations(db, work_order, current_user.user_id))

        order.status = OrderStatus.CANCELLED.value
        if reason:
            order.notes = f"{order.notes}\n{reason}" if order.notes else reason

        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Cancellation of order %s failed, rolled back", order_id)
        raise

    logger.info("Order %s cancelled, %d reservation(s) released", order.order_number, released)
    db.refresh(order)
    return order


def order_status_lookup():
    return [Lookup(id=status.value, name=status.name.capitalize()) for status in OrderStatus]
