from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from shared.core.database import get_fabrication_db as get_db
from shared.core.schemas import Lookup, UserToken

from ...schemas.production.orders_schemas import OrderCancel, OrderListResponse, OrderOut, OrderRequest
from ...crud.production import orders_crud as crud

from shared.core.auth import validate_current_token


router = APIRouter(prefix="/api/orders",
                   tags=["orders"], dependencies=[Depends(validate_current_token)])


@router.get("/all", response_model=OrderListResponse)
def get_orders(
    params: OrderRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_orders(db, current_user.org_id, params)


@router.get("/status-lookup", response_model=List[Lookup])
def order_status_lookup():
    return crud.order_status_lookup()


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    db_order = crud.get_order_by_id(db, order_id, current_user.org_id)
    if not db_order:
        raise HTTPException(status_code=404, detail="Order not found")
    return db_order


@router.post("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: UUID,
    request: Optional[OrderCancel] = None,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.cancel_order(db, order_id, current_user, request.reason if request else None)
