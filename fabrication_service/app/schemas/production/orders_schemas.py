from pydantic import BaseModel
from uuid import UUID
from typing import List, Optional
from datetime import date, datetime

from shared.core.schemas import CommonQueryParams


class OrderOut(BaseModel):
    id: UUID
    org_id: UUID
    quote_id: Optional[UUID] = None
    client_id: Optional[UUID] = None
    client_name: Optional[str] = None
    order_number: int
    status: str
    service_type: str
    start_date: Optional[date] = None
    expected_end_date: Optional[date] = None
    progress: Optional[int] = 0
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class OrderRequest(CommonQueryParams):
    status: Optional[str] = None
    service_type: Optional[str] = None


class OrderListResponse(BaseModel):
    orders: List[OrderOut]
    total: int


class OrderCancel(BaseModel):
    reason: Optional[str] = None
