from pydantic import BaseModel
from uuid import UUID
from typing import List, Optional
from datetime import date, datetime

from shared.core.schemas import CommonQueryParams
from ...enum.production_enum import ServiceType
from ...enum.sales_enum import LeadPriority, LeadStage


class LeadCreate(BaseModel):
    client_name: str
    phone: str
    client_id: Optional[UUID] = None
    source: Optional[str] = None
    service_type: ServiceType
    priority: LeadPriority = LeadPriority.MEDIUM
    expected_value: Optional[float] = None
    next_action_date: Optional[date] = None
    notes: Optional[str] = None


class LeadStageUpdate(BaseModel):
    stage: LeadStage


class LeadOut(BaseModel):
    id: UUID
    org_id: UUID
    client_id: Optional[UUID] = None
    client_name: str
    phone: str
    source: Optional[str] = None
    service_type: str
    stage: str
    priority: str
    expected_value: Optional[float] = None
    next_action_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LeadRequest(CommonQueryParams):
    stage: Optional[str] = None
    service_type: Optional[str] = None


class LeadListResponse(BaseModel):
    leads: List[LeadOut]
    total: int
