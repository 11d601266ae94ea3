from pydantic import BaseModel
from uuid import UUID
from typing import Any, Dict, Optional
from datetime import datetime

from ...enum.sales_enum import VisitStatus
from ..inventory.bom_templates_schemas import Measurements


class VisitCreate(BaseModel):
    lead_id: UUID
    scheduled_at: datetime
    assigned_user_id: Optional[str] = None
    address_override: Optional[str] = None


class VisitMeasurementsUpdate(BaseModel):
    measurements: Measurements
    checklist: Optional[Dict[str, bool]] = None


class VisitStatusUpdate(BaseModel):
    status: VisitStatus
    scheduled_at: Optional[datetime] = None


class VisitOut(BaseModel):
    id: UUID
    org_id: UUID
    lead_id: Optional[UUID] = None
    scheduled_at: datetime
    assigned_user_id: Optional[str] = None
    address_override: Optional[str] = None
    status: str
    checklist: Optional[Dict[str, bool]] = None
    measurements: Optional[Dict[str, Any]] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
