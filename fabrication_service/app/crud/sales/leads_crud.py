# app/crud/sales/leads_crud.py
from typing import Optional
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from shared.core.schemas import Lookup
from ...enum.sales_enum import LeadStage
from ...models.sales.leads import Lead
from ...schemas.sales.leads_schemas import LeadCreate, LeadListResponse, LeadOut, LeadRequest


def build_leads_filters(org_id: UUID, params: LeadRequest):
    filters = [
        Lead.org_id == org_id,
        Lead.is_deleted == False
    ]

    if params.stage and params.stage.lower() != "all":
        filters.append(func.upper(Lead.stage) == params.stage.upper())

    if params.service_type and params.service_type.lower() != "all":
        filters.append(func.upper(Lead.service_type) == params.service_type.upper())

    if params.search:
        search_term = f"%{params.search}%"
        filters.append(or_(Lead.client_name.ilike(search_term), Lead.phone.ilike(search_term)))

    return filters


def get_leads(db: Session, org_id: UUID, params: LeadRequest) -> LeadListResponse:
    base_query = db.query(Lead).filter(*build_leads_filters(org_id, params))
    total = base_query.count()

    leads = (
        base_query
        .order_by(Lead.created_at.desc())
        .offset(params.skip)
        .limit(params.limit)
        .all()
    )
    return LeadListResponse(leads=[LeadOut.model_validate(lead) for lead in leads], total=total)


def get_lead_by_id(db: Session, lead_id: UUID, org_id: UUID) -> Optional[Lead]:
    return db.query(Lead).filter(
        Lead.id == lead_id,
        Lead.org_id == org_id,
        Lead.is_deleted == False
    ).first()


def create_lead(db: Session, lead: LeadCreate, org_id: UUID) -> Lead:
    lead_data = lead.model_dump()
    lead_data["service_type"] = lead.service_type.value
    lead_data["priority"] = lead.priority.value

    db_lead = Lead(**lead_data, org_id=org_id, stage=LeadStage.NEW.value)
    db.add(db_lead)
    db.commit()
    db.refresh(db_lead)
    return db_lead


def update_lead_stage(db: Session, lead_id: UUID, stage: LeadStage, org_id: UUID) -> Optional[Lead]:
    db_lead = get_lead_by_id(db, lead_id, org_id)
    if not db_lead:
        return None

    db_lead.stage = stage.value
    db.commit()
    db.refresh(db_lead)
    return db_lead


def delete_lead_soft(db: Session, lead_id: UUID, org_id: UUID) -> bool:
    db_lead = get_lead_by_id(db, lead_id, org_id)
    if not db_lead:
        return False

    db_lead.is_deleted = True
    db_lead.deleted_at = func.now()
    db.commit()
    return True


def lead_stage_lookup():
    return [Lookup(id=stage.value, name=stage.name.replace("_", " ").capitalize()) for stage in LeadStage]
