from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from shared.core.database import get_fabrication_db as get_db
from shared.core.schemas import Lookup, UserToken

from ...schemas.procurement.purchase_orders_schemas import (
    PurchaseOrderCreate,
    PurchaseOrderListResponse,
    PurchaseOrderOut,
    PurchaseOrderRequest,
)
from ...crud.procurement import purchase_orders_crud as crud

from shared.core.auth import validate_current_token


router = APIRouter(prefix="/api/purchase-orders",
                   tags=["purchase orders"], dependencies=[Depends(validate_current_token)])


@router.get("/all", response_model=PurchaseOrderListResponse)
def get_purchase_orders(
    params: PurchaseOrderRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_purchase_orders(db, current_user.org_id, params)


@router.get("/status-lookup", response_model=List[Lookup])
def purchase_order_status_lookup():
    return crud.purchase_order_status_lookup()


@router.get("/{po_id}", response_model=PurchaseOrderOut)
def get_purchase_order(
    po_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    db_po = crud.get_purchase_order_by_id(db, po_id, current_user.org_id)
    if not db_po:
        raise HTTPException(status_code=404, detail="Purchase order not found")
    return crud.to_purchase_order_out(db_po)


@router.post("/", response_model=PurchaseOrderOut)
def create_purchase_order(
    purchase_order: PurchaseOrderCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_purchase_order(db, purchase_order, current_user.org_id)


@router.post("/{po_id}/send", response_model=PurchaseOrderOut)
def send_purchase_order(
    po_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.mark_purchase_order_sent(db, po_id, current_user.org_id)


@router.post("/{po_id}/receive", response_model=PurchaseOrderOut)
def receive_purchase_order(
    po_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.receive_purchase_order(db, po_id, current_user)


@router.post("/{po_id}/cancel", response_model=PurchaseOrderOut)
def cancel_purchase_order(
    po_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.cancel_purchase_order(db, po_id, current_user.org_id)
