from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_fabrication_db as get_db
from shared.core.schemas import Lookup, UserToken

from ...schemas.production.work_orders_schemas import (
    WorkOrderCompletionResponse,
    WorkOrderDetailOut,
    WorkOrderListResponse,
    WorkOrderRequest,
    WorkOrderStatusUpdate,
)
from ...crud.production import work_orders_crud as crud

from shared.core.auth import validate_current_token


router = APIRouter(prefix="/api/work-orders",
                   tags=["work orders"], dependencies=[Depends(validate_current_token)])


@router.get("/all", response_model=WorkOrderListResponse)
def get_work_orders(
    params: WorkOrderRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_work_orders(db, current_user.org_id, params)


@router.get("/status-lookup", response_model=List[Lookup])
def work_order_status_lookup():
    return crud.work_order_status_lookup()


@router.get("/{work_order_id}", response_model=WorkOrderDetailOut)
def get_work_order(
    work_order_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_work_order_detail(db, work_order_id, current_user.org_id)


@router.put("/{work_order_id}/status", response_model=WorkOrderDetailOut)
def update_work_order_status(
    work_order_id: UUID,
    update: WorkOrderStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_work_order_status(db, work_order_id, update, current_user.org_id)


@router.post("/{work_order_id}/complete", response_model=WorkOrderCompletionResponse)
def complete_work_order(
    work_order_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.complete_work_order(db, work_order_id, current_user)
