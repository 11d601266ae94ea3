# app/crud/inventory/stock_ledger_crud.py
"""
Every write to StockItem.quantity / StockItem.reserved goes through here.

Functions in this module only stage changes on the session (add + flush). The
caller owns the transaction: it commits once the whole unit of work (order
conversion, work order completion, cancellation, receipt) succeeded, or rolls
back so no counter moves without its reservation/movement rows.
"""
import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from ...enum.inventory_enum import StockMovementType, StockReservationStatus
from ...models.inventory.bom_templates import ServiceBOMTemplate
from ...models.inventory.stock_items import StockItem
from ...models.inventory.stock_movements import StockMovement
from ...models.inventory.stock_reservations import StockReservation
from .bom_calculator import calculate_bom_requirements
from .bom_formula import to_decimal

logger = logging.getLogger(__name__)


def find_bom_template(db: Session, org_id: UUID, service_type: str) -> Optional[ServiceBOMTemplate]:
    return (
        db.query(ServiceBOMTemplate)
        .filter(
            ServiceBOMTemplate.org_id == org_id,
            ServiceBOMTemplate.service_type == service_type,
            ServiceBOMTemplate.is_deleted == False
        )
        .order_by(ServiceBOMTemplate.created_at)
        .first()
    )


def lock_stock_items(db: Session, org_id: UUID, item_ids: Iterable[UUID]) -> Dict[UUID, StockItem]:
    """Load the org's stock rows with FOR UPDATE (no-op on SQLite)."""
    item_ids = set(item_ids)
    if not item_ids:
        return {}

    rows = (
        db.query(StockItem)
        .filter(
            StockItem.org_id == org_id,
            StockItem.id.in_(item_ids),
            StockItem.is_deleted == False
        )
        .with_for_update()
        .all()
    )
    return {row.id: row for row in rows}


def record_movement(
    db: Session,
    item: StockItem,
    movement_type: StockMovementType,
    quantity: Decimal,
    *,
    work_order_id: Optional[UUID] = None,
    purchase_id: Optional[UUID] = None,
    cost_unit: Optional[Decimal] = None,
    notes: Optional[str] = None,
    user_id: Optional[str] = None,
) -> StockMovement:
    movement = StockMovement(
        org_id=item.org_id,
        stock_item_id=item.id,
        type=movement_type.value,
        quantity=quantity,
        cost_unit=cost_unit,
        related_work_order_id=work_order_id,
        related_purchase_id=purchase_id,
        notes=notes,
        created_by=user_id,
    )
    db.add(movement)
    return movement


# ----------------- Reserve -----------------
def reserve_for_work_order(
    db: Session,
    work_order,
    measurements: Optional[Mapping],
    user_id: Optional[str] = None,
) -> List[StockReservation]:
    """
    Hold BOM materials for a freshly created work order.

    Best effort: without measurements or a template for the service type
    nothing is reserved and the work order simply starts empty.
    """
    if not measurements:
        logger.info("Work order %s: no measurements recorded, skipping reservations", work_order.id)
        return []

    template = find_bom_template(db, work_order.org_id, work_order.service_type)
    if not template:
        logger.info("Work order %s: no BOM template for %s, skipping reservations",
                    work_order.id, work_order.service_type)
        return []

    requirements = calculate_bom_requirements(template, measurements)
    items = lock_stock_items(db, work_order.org_id, [r.stock_item_id for r in requirements])

    reservations = []
    for requirement in requirements:
        if requirement.quantity <= 0:
            continue

        item = items.get(requirement.stock_item_id)
        if item is None:
            logger.warning("Work order %s: BOM line references unknown stock item %s, skipped",
                           work_order.id, requirement.stock_item_id)
            continue

        reservation = StockReservation(
            org_id=work_order.org_id,
            work_order_id=work_order.id,
            stock_item_id=item.id,
            quantity_reserved=requirement.quantity,
            status=StockReservationStatus.RESERVED.value,
        )
        db.add(reservation)

        item.reserved = to_decimal(item.reserved) + requirement.quantity
        record_movement(db, item, StockMovementType.RESERVE, requirement.quantity,
                        work_order_id=work_order.id, user_id=user_id)

        available = to_decimal(item.quantity) - item.reserved
        if available < 0:
            # backorder or data problem, not decided yet, so only flagged
            logger.warning("Stock item %s (%s) over-reserved, available is now %s",
                           item.id, item.name, available)

        reservations.append(reservation)

    db.flush()
    logger.info("Work order %s: %d reservation(s) created", work_order.id, len(reservations))
    return reservations


def get_open_reservations(db: Session, work_order_id: UUID, org_id: UUID) -> List[StockReservation]:
    # only RESERVED rows are ever acted on, so repeating consume/release is harmless
    return (
        db.query(StockReservation)
        .filter(
            StockReservation.work_order_id == work_order_id,
            StockReservation.org_id == org_id,
            StockReservation.status == StockReservationStatus.RESERVED.value
        )
        .all()
    )


# ----------------- Consume -----------------
def consume_work_order_reservations(db: Session, work_order, user_id: Optional[str] = None) -> List[StockReservation]:
    reservations = get_open_reservations(db, work_order.id, work_order.org_id)
    items = lock_stock_items(db, work_order.org_id, [r.stock_item_id for r in reservations])
    now = datetime.now(timezone.utc)

    for reservation in reservations:
        item = items.get(reservation.stock_item_id)
        quantity = to_decimal(reservation.quantity_reserved)

        if item is not None:
            # physical removal and release of the hold move together
            item.quantity = to_decimal(item.quantity) - quantity
            item.reserved = to_decimal(item.reserved) - quantity
            record_movement(db, item, StockMovementType.OUT, quantity,
                            work_order_id=work_order.id, user_id=user_id)
        else:
            logger.warning("Reservation %s points at a missing stock item, marking consumed only", reservation.id)

        reservation.status = StockReservationStatus.CONSUMED.value
        reservation.consumed_at = now

    db.flush()
    logger.info("Work order %s: %d reservation(s) consumed", work_order.id, len(reservations))
    return reservations


# ----------------- Release -----------------
def release_work_order_reservations(db: Session, work_order, user_id: Optional[str] = None) -> List[StockReservation]:
    reservations = get_open_reservations(db, work_order.id, work_order.org_id)
    items = lock_stock_items(db, work_order.org_id, [r.stock_item_id for r in reservations])
    now = datetime.now(timezone.utc)

    for reservation in reservations:
        item = items.get(reservation.stock_item_id)
        quantity = to_decimal(reservation.quantity_reserved)

        if item is not None:
            item.reserved = to_decimal(item.reserved) - quantity
            record_movement(db, item, StockMovementType.UNRESERVE, quantity,
                            work_order_id=work_order.id, user_id=user_id)

        reservation.status = StockReservationStatus.CANCELLED.value
        reservation.cancelled_at = now

    db.flush()
    logger.info("Work order %s: %d reservation(s) released", work_order.id, len(reservations))
    return reservations


# ----------------- Receive / manual movements -----------------
def receive_stock(
    db: Session,
    item: StockItem,
    quantity: Decimal,
    cost_unit: Optional[Decimal] = None,
    purchase_id: Optional[UUID] = None,
    notes: Optional[str] = None,
    user_id: Optional[str] = None,
) -> StockMovement:
    on_hand = to_decimal(item.quantity)

    if cost_unit is not None and on_hand + quantity > 0:
        # weighted average over what is physically on hand
        current_value = max(on_hand, Decimal("0")) * to_decimal(item.cost_avg)
        new_total = max(on_hand, Decimal("0")) + quantity
        item.cost_avg = ((current_value + quantity * cost_unit) / new_total).quantize(Decimal("0.01"))

    item.quantity = on_hand + quantity
    movement = record_movement(db, item, StockMovementType.IN, quantity, purchase_id=purchase_id,
                               cost_unit=cost_unit, notes=notes, user_id=user_id)
    db.flush()
    return movement


def issue_stock(db: Session, item: StockItem, quantity: Decimal, notes: Optional[str] = None,
                user_id: Optional[str] = None) -> StockMovement:
    item.quantity = to_decimal(item.quantity) - quantity
    movement = record_movement(db, item, StockMovementType.OUT, quantity, notes=notes, user_id=user_id)
    db.flush()
    return movement


def adjust_stock(db: Session, item: StockItem, counted: Decimal, notes: Optional[str] = None,
                 user_id: Optional[str] = None) -> StockMovement:
    """Inventory count: on-hand becomes the counted figure, the movement keeps the count."""
    item.quantity = counted
    movement = record_movement(db, item, StockMovementType.ADJUST, counted, notes=notes, user_id=user_id)
    db.flush()
    return movement
