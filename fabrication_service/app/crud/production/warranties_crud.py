# app/crud/production/warranties_crud.py
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from ...enum.production_enum import WarrantyStatus
from ...models.production.orders import Order
from ...models.production.warranties import Warranty
from ...schemas.production.warranties_schemas import WarrantyListResponse, WarrantyOut, WarrantyRequest


def _as_utc(value: datetime) -> datetime:
    # some backends hand timestamps back without tzinfo
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


def get_warranty_status(warranty: Warranty, now: Optional[datetime] = None) -> WarrantyStatus:
    now = now or datetime.now(timezone.utc)
    return WarrantyStatus.ACTIVE if _as_utc(warranty.end_date) >= now else WarrantyStatus.EXPIRED


def to_warranty_out(warranty: Warranty, now: Optional[datetime] = None) -> WarrantyOut:
    order = warranty.order
    return WarrantyOut.model_validate({
        **warranty.__dict__,
        "order_number": order.order_number if order else None,
        "client_name": order.client_name if order else None,
        "status": get_warranty_status(warranty, now).value,
    })


def get_warranties(db: Session, org_id: UUID, params: WarrantyRequest) -> WarrantyListResponse:
    query = (
        db.query(Warranty)
        .join(Order, Warranty.order_id == Order.id)
        .options(joinedload(Warranty.order))
        .filter(Warranty.org_id == org_id)
    )

    if params.search:
        search_term = f"%{params.search}%"
        conditions = [Order.client_name.ilike(search_term)]
        if params.search.isdigit():
            conditions.append(Order.order_number == int(params.search))
        query = query.filter(or_(*conditions))

    now = datetime.now(timezone.utc)
    if params.status and params.status.lower() != "all":
        if params.status.upper() == WarrantyStatus.ACTIVE.value:
            query = query.filter(Warranty.end_date >= now)
        elif params.status.upper() == WarrantyStatus.EXPIRED.value:
            query = query.filter(Warranty.end_date < now)

    total = query.count()
    warranties = (
        query
        .order_by(Warranty.end_date.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return WarrantyListResponse(warranties=[to_warranty_out(w, now) for w in warranties], total=total)
