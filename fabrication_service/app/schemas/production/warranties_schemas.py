from pydantic import BaseModel
from uuid import UUID
from typing import List, Optional
from datetime import datetime

from shared.core.schemas import CommonQueryParams


class WarrantyOut(BaseModel):
    id: UUID
    org_id: UUID
    order_id: UUID
    order_number: Optional[int] = None
    client_id: Optional[UUID] = None
    client_name: Optional[str] = None
    start_date: datetime
    end_date: datetime
    terms: Optional[str] = None
    status: str


class WarrantyRequest(CommonQueryParams):
    status: Optional[str] = None


class WarrantyListResponse(BaseModel):
    warranties: List[WarrantyOut]
    total: int
