from typing import Dict, List
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from shared.core.database import get_fabrication_db as get_db
from shared.core.schemas import Lookup, UserToken

from ...schemas.sales.leads_schemas import LeadCreate, LeadListResponse, LeadOut, LeadRequest, LeadStageUpdate
from ...crud.sales import leads_crud as crud

from shared.core.auth import validate_current_token


router = APIRouter(prefix="/api/leads",
                   tags=["leads"], dependencies=[Depends(validate_current_token)])


@router.get("/all", response_model=LeadListResponse)
def get_leads(
    params: LeadRequest = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_leads(db, current_user.org_id, params)


@router.get("/stage-lookup", response_model=List[Lookup])
def lead_stage_lookup():
    return crud.lead_stage_lookup()


@router.post("/", response_model=LeadOut)
def create_lead(
    lead: LeadCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_lead(db, lead, current_user.org_id)


@router.put("/{lead_id}/stage", response_model=LeadOut)
def update_lead_stage(
    lead_id: UUID,
    update: LeadStageUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    db_lead = crud.update_lead_stage(db, lead_id, update.stage, current_user.org_id)
    if not db_lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    return db_lead


@router.delete("/{lead_id}", response_model=Dict[str, str])
def delete_lead(
    lead_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    if not crud.delete_lead_soft(db, lead_id, current_user.org_id):
        raise HTTPException(status_code=404, detail="Lead not found")
    return {"message": "Lead deleted successfully"}
