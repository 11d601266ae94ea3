from pydantic import BaseModel, Field
from uuid import UUID
from typing import List, Optional
from datetime import date, datetime

from shared.core.schemas import CommonQueryParams


class QuoteCreate(BaseModel):
    lead_id: UUID
    visit_id: Optional[UUID] = None
    valid_until: Optional[date] = None
    subtotal: float = Field(0, ge=0)
    discount_value: float = Field(0, ge=0)
    delivery_time_days: Optional[int] = Field(None, ge=0)
    terms_text: Optional[str] = None


class QuoteOut(BaseModel):
    id: UUID
    org_id: UUID
    lead_id: Optional[UUID] = None
    visit_id: Optional[UUID] = None
    quote_number: int
    status: str
    valid_until: Optional[date] = None
    subtotal: float
    discount_value: float
    total: float
    delivery_time_days: Optional[int] = None
    terms_text: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class QuoteRequest(CommonQueryParams):
    status: Optional[str] = None


class QuoteListResponse(BaseModel):
    quotes: List[QuoteOut]
    total: int


class QuoteConversionResponse(BaseModel):
    order_id: UUID
    order_number: int
    work_order_id: UUID
    reservations_created: int
