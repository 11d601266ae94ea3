from typing import Dict, List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from shared.core.database import get_fabrication_db as get_db
from shared.core.schemas import UserToken

from ...schemas.inventory.bom_templates_schemas import (
    BOMCalculationResponse,
    BOMTemplateCreate,
    BOMTemplateOut,
    BOMTemplateUpdate,
    Measurements,
)
from ...crud.inventory import bom_templates_crud as crud

from shared.core.auth import validate_current_token


router = APIRouter(prefix="/api/bom-templates",
                   tags=["bom templates"], dependencies=[Depends(validate_current_token)])


@router.get("/all", response_model=List[BOMTemplateOut])
def get_bom_templates(
    service_type: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_bom_templates(db, current_user.org_id, service_type)


@router.get("/{template_id}", response_model=BOMTemplateOut)
def get_bom_template(
    template_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    db_template = crud.get_bom_template_by_id(db, template_id, current_user.org_id)
    if not db_template:
        raise HTTPException(status_code=404, detail="BOM template not found")
    return db_template


@router.post("/", response_model=BOMTemplateOut)
def create_bom_template(
    template: BOMTemplateCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_bom_template(db, template, current_user.org_id)


@router.put("/", response_model=BOMTemplateOut)
def update_bom_template(
    template: BOMTemplateUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    db_template = crud.update_bom_template(db, template, current_user.org_id)
    if not db_template:
        raise HTTPException(status_code=404, detail="BOM template not found")
    return db_template


@router.delete("/{template_id}", response_model=Dict[str, str])
def delete_bom_template(
    template_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    if not crud.delete_bom_template_soft(db, template_id, current_user.org_id):
        raise HTTPException(status_code=404, detail="BOM template not found")
    return {"message": "BOM template deleted successfully"}


@router.post("/{template_id}/calculate", response_model=BOMCalculationResponse)
def calculate_bom_template(
    template_id: UUID,
    measurements: Measurements,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.calculate_template_requirements(db, template_id, measurements, current_user.org_id)
