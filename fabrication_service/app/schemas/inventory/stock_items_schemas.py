from pydantic import BaseModel, Field, model_validator
from uuid import UUID
from typing import List, Optional
from datetime import datetime

from shared.core.schemas import CommonQueryParams
from ...crud.inventory.bom_formula import MAX_QUANTITY
from ...enum.inventory_enum import StockCategory, StockHealth, StockMovementType


class StockItemBase(BaseModel):
    name: str
    category: StockCategory = StockCategory.OTHER
    unit: Optional[str] = "un"
    sku: Optional[str] = None
    location: Optional[str] = None
    min_level: float = Field(0, ge=0)
    reorder_point: float = Field(0, ge=0)
    lead_time_days: int = Field(0, ge=0)
    cost_avg: float = Field(0, ge=0)
    active: bool = True


class StockItemCreate(StockItemBase):
    # opening balance, written as an IN movement
    quantity: float = Field(0, ge=0, le=float(MAX_QUANTITY))

    model_config = {"allow_inf_nan": False}


class StockItemUpdate(BaseModel):
    id: UUID
    name: Optional[str] = None
    category: Optional[StockCategory] = None
    unit: Optional[str] = None
    sku: Optional[str] = None
    location: Optional[str] = None
    min_level: Optional[float] = Field(None, ge=0)
    reorder_point: Optional[float] = Field(None, ge=0)
    lead_time_days: Optional[int] = Field(None, ge=0)
    cost_avg: Optional[float] = Field(None, ge=0)
    active: Optional[bool] = None


class StockItemOut(StockItemBase):
    id: UUID
    org_id: UUID
    category: str
    quantity: float
    reserved: float
    available: float
    health: StockHealth
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class StockItemRequest(CommonQueryParams):
    category: Optional[str] = None
    health: Optional[str] = None
    active_only: Optional[bool] = False


class StockItemListResponse(BaseModel):
    items: List[StockItemOut]
    total: int


class StockMovementCreate(BaseModel):
    type: StockMovementType
    quantity: float = Field(..., ge=0, le=float(MAX_QUANTITY))
    cost_unit: Optional[float] = Field(None, ge=0, le=float(MAX_QUANTITY))
    notes: Optional[str] = None

    model_config = {"allow_inf_nan": False}

    @model_validator(mode="after")
    def check_quantity(self):
        # only a stock count may set on-hand to zero
        if self.type != StockMovementType.ADJUST and self.quantity <= 0:
            raise ValueError(f"{self.type.value} movements need a quantity above zero")
        return self


class StockMovementOut(BaseModel):
    id: UUID
    stock_item_id: UUID
    type: str
    quantity: float
    cost_unit: Optional[float] = None
    related_work_order_id: Optional[UUID] = None
    related_purchase_id: Optional[UUID] = None
    notes: Optional[str] = None
    created_by: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PurchaseSuggestionOut(BaseModel):
    item_id: UUID
    name: str
    unit: Optional[str] = None
    current: float
    reserved: float
    available: float
    reorder_point: float
    suggested_buy: float

    model_config = {"from_attributes": True}
