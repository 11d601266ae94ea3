from pydantic import BaseModel
from uuid import UUID
from typing import Any, Dict, List, Optional
from datetime import datetime

from shared.core.schemas import CommonQueryParams
from ...enum.production_enum import WorkOrderStatus


class StockReservationOut(BaseModel):
    id: UUID
    stock_item_id: UUID
    stock_item_name: Optional[str] = None
    unit: Optional[str] = None
    quantity_reserved: float
    status: str
    created_at: Optional[datetime] = None
    consumed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None


class WorkOrderOut(BaseModel):
    id: UUID
    org_id: UUID
    order_id: UUID
    order_number: Optional[int] = None
    client_name: Optional[str] = None
    service_type: str
    status: str
    assigned_team: Optional[List[str]] = None
    checklist: Optional[Dict[str, Any]] = None
    measurements: Optional[Dict[str, Any]] = None
    finished_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class WorkOrderDetailOut(WorkOrderOut):
    reservations: List[StockReservationOut] = []


class WorkOrderRequest(CommonQueryParams):
    status: Optional[str] = None


class WorkOrderListResponse(BaseModel):
    work_orders: List[WorkOrderOut]
    total: int


class WorkOrderStatusUpdate(BaseModel):
    # empty moves to the next shop floor stage
    status: Optional[WorkOrderStatus] = None
    assigned_team: Optional[List[str]] = None
    checklist: Optional[Dict[str, Any]] = None


class WorkOrderCompletionResponse(BaseModel):
    work_order_id: UUID
    order_id: UUID
    warranty_id: UUID
    warranty_end_date: datetime
    reservations_consumed: int
