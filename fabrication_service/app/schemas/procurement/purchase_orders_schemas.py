from pydantic import BaseModel, Field, model_validator
from uuid import UUID
from typing import List, Optional
from datetime import date, datetime

from shared.core.schemas import CommonQueryParams


class PurchaseOrderLineCreate(BaseModel):
    stock_item_id: UUID
    quantity: float = Field(..., gt=0)
    unit_cost_estimated: Optional[float] = Field(None, ge=0)


class PurchaseOrderCreate(BaseModel):
    supplier_name: str
    expected_delivery_date: Optional[date] = None
    notes: Optional[str] = None
    lines: List[PurchaseOrderLineCreate] = Field(default_factory=list)
    from_suggestions: bool = False

    @model_validator(mode="after")
    def check_lines(self):
        if not self.from_suggestions and not self.lines:
            raise ValueError("Purchase order needs at least one line or from_suggestions=true")
        return self


class PurchaseOrderLineOut(BaseModel):
    id: UUID
    stock_item_id: UUID
    stock_item_name: Optional[str] = None
    unit: Optional[str] = None
    quantity: float
    unit_cost_estimated: Optional[float] = None


class PurchaseOrderOut(BaseModel):
    id: UUID
    org_id: UUID
    supplier_name: str
    status: str
    expected_delivery_date: Optional[date] = None
    total_estimated: float = 0
    notes: Optional[str] = None
    received_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    lines: List[PurchaseOrderLineOut] = []


class PurchaseOrderRequest(CommonQueryParams):
    status: Optional[str] = None


class PurchaseOrderListResponse(BaseModel):
    purchase_orders: List[PurchaseOrderOut]
    total: int
