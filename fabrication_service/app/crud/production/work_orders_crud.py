# app/crud/production/work_orders_crud.py
import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from shared.core.config import settings
from shared.core.schemas import Lookup, UserToken
from shared.helpers.json_response_helper import error_response, not_found_response
from shared.utils.app_status_code import AppStatusCode
from ...enum.production_enum import WORK_ORDER_STAGES, OrderStatus, WorkOrderStatus
from ...models.inventory.stock_reservations import StockReservation
from ...models.production.orders import Order
from ...models.production.warranties import Warranty
from ...models.production.work_orders import WorkOrder
from ...schemas.production.work_orders_schemas import (
    StockReservationOut,
    WorkOrderCompletionResponse,
    WorkOrderDetailOut,
    WorkOrderListResponse,
    WorkOrderOut,
    WorkOrderRequest,
    WorkOrderStatusUpdate,
)
from ..inventory import stock_ledger_crud as ledger

logger = logging.getLogger(__name__)


def _work_order_data(work_order: WorkOrder) -> dict:
    order = work_order.order
    return {
        **work_order.__dict__,
        "order_number": order.order_number if order else None,
        "client_name": order.client_name if order else None,
    }


def get_work_orders(db: Session, org_id: UUID, params: WorkOrderRequest) -> WorkOrderListResponse:
    base_query = (
        db.query(WorkOrder)
        .join(Order, WorkOrder.order_id == Order.id)
        .options(joinedload(WorkOrder.order))
        .filter(WorkOrder.org_id == org_id)
    )

    if params.status and params.status.lower() != "all":
        base_query = base_query.filter(func.upper(WorkOrder.status) == params.status.upper())

    if params.search:
        search_term = f"%{params.search}%"
        conditions = [Order.client_name.ilike(search_term), WorkOrder.service_type.ilike(search_term)]
        if params.search.isdigit():
            conditions.append(Order.order_number == int(params.search))
        base_query = base_query.filter(or_(*conditions))

    total = base_query.count()
    work_orders = (
        base_query
        .order_by(WorkOrder.created_at.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return WorkOrderListResponse(
        work_orders=[WorkOrderOut.model_validate(_work_order_data(wo)) for wo in work_orders],
        total=total
    )


def get_work_order_by_id(db: Session, work_order_id: UUID, org_id: UUID) -> Optional[WorkOrder]:
    return db.query(WorkOrder).filter(WorkOrder.id == work_order_id, WorkOrder.org_id == org_id).first()


def get_work_order_or_404(db: Session, work_order_id: UUID, org_id: UUID) -> WorkOrder:
    work_order = get_work_order_by_id(db, work_order_id, org_id)
    if not work_order:
        return not_found_response("Work order")
    return work_order


def get_work_order_detail(db: Session, work_order_id: UUID, org_id: UUID) -> WorkOrderDetailOut:
    work_order = get_work_order_or_404(db, work_order_id, org_id)

    reservations = (
        db.query(StockReservation)
        .options(joinedload(StockReservation.stock_item))
        .filter(StockReservation.work_order_id == work_order.id, StockReservation.org_id == org_id)
        .order_by(StockReservation.created_at)
        .all()
    )

    return WorkOrderDetailOut.model_validate({
        **_work_order_data(work_order),
        "reservations": [
            StockReservationOut(
                id=r.id,
                stock_item_id=r.stock_item_id,
                stock_item_name=r.stock_item.name if r.stock_item else None,
                unit=r.stock_item.unit if r.stock_item else None,
                quantity_reserved=r.quantity_reserved,
                status=r.status,
                created_at=r.created_at,
                consumed_at=r.consumed_at,
                cancelled_at=r.cancelled_at,
            )
            for r in reservations
        ],
    })


def work_order_status_lookup() -> List[Lookup]:
    return [Lookup(id=status.value, name=status.name.capitalize()) for status in WorkOrderStatus]


def _stage_progress(status: WorkOrderStatus) -> int:
    return int(WORK_ORDER_STAGES.index(status) * 100 / len(WORK_ORDER_STAGES))


# ----------------- Stage update -----------------
def update_work_order_status(
    db: Session,
    work_order_id: UUID,
    update: WorkOrderStatusUpdate,
    org_id: UUID
) -> WorkOrderDetailOut:
    work_order = get_work_order_or_404(db, work_order_id, org_id)

    if work_order.status == WorkOrderStatus.FINISHED.value:
        return error_response(
            message="Work order is already finished",
            status_code=AppStatusCode.INVALID_STATE_TRANSITION,
            http_status=400
        )

    if update.status == WorkOrderStatus.FINISHED:
        return error_response(
            message="Use the complete action to finish a work order",
            status_code=AppStatusCode.INVALID_STATE_TRANSITION,
            http_status=400
        )

    if update.status is None:
        current = WORK_ORDER_STAGES.index(WorkOrderStatus(work_order.status))
        if current + 1 >= len(WORK_ORDER_STAGES):
            return error_response(
                message=f"{work_order.status} is the last stage, complete the work order instead",
                status_code=AppStatusCode.INVALID_STATE_TRANSITION,
                http_status=400
            )
        new_status = WORK_ORDER_STAGES[current + 1]
    else:
        new_status = update.status

    work_order.status = new_status.value
    if update.assigned_team is not None:
        work_order.assigned_team = update.assigned_team
    if update.checklist is not None:
        work_order.checklist = update.checklist

    order = work_order.order
    if order and order.status not in (OrderStatus.CANCELLED.value, OrderStatus.COMPLETED.value):
        order.progress = _stage_progress(new_status)
        order.status = (
            OrderStatus.INSTALLATION.value
            if new_status == WorkOrderStatus.INSTALLATION
            else OrderStatus.PRODUCTION.value
        )

    db.commit()
    return get_work_order_detail(db, work_order.id, org_id)


# ----------------- Complete -----------------
def complete_work_order(db: Session, work_order_id: UUID, current_user: UserToken) -> WorkOrderCompletionResponse:
    """
    Finish a work order: reserved materials leave the stock, the work order
    and its order are closed and the warranty window starts now.

    One transaction; a failure at any step leaves stock, reservations and
    statuses exactly as they were.
    """
    org_id = current_user.org_id
    work_order = get_work_order_or_404(db, work_order_id, org_id)

    if work_order.status == WorkOrderStatus.FINISHED.value:
        return error_response(
            message="Work order is already finished",
            status_code=AppStatusCode.INVALID_STATE_TRANSITION,
            http_status=400
        )

    order = work_order.order
    if order is None or order.status == OrderStatus.CANCELLED.value:
        return error_response(
            message="Work order belongs to a cancelled or missing order",
            status_code=AppStatusCode.INVALID_STATE_TRANSITION,
            http_status=400
        )

    now = datetime.now(timezone.utc)
    try:
        consumed = ledger.consume_work_order_reservations(db, work_order, current_user.user_id)

        work_order.status = WorkOrderStatus.FINISHED.value
        work_order.finished_at = now

        order.status = OrderStatus.COMPLETED.value
        order.progress = 100

        warranty = Warranty(
            org_id=org_id,
            order_id=order.id,
            client_id=order.client_id,
            start_date=now,
            end_date=now + timedelta(days=settings.WARRANTY_DAYS),
        )
        db.add(warranty)
        db.flush()

        result = WorkOrderCompletionResponse(
            work_order_id=work_order.id,
            order_id=order.id,
            warranty_id=warranty.id,
            warranty_end_date=warranty.end_date,
            reservations_consumed=len(consumed),
        )
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Completion of work order %s failed, rolled back", work_order_id)
        raise

    logger.info("Work order %s finished, %d reservation(s) consumed", work_order_id, len(consumed))
    return result
