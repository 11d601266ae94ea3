from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from shared.core.database import get_fabrication_db as get_db
from shared.core.schemas import UserToken

from ...schemas.sales.visits_schemas import VisitCreate, VisitMeasurementsUpdate, VisitOut, VisitStatusUpdate
from ...crud.sales import visits_crud as crud

from shared.core.auth import validate_current_token


router = APIRouter(prefix="/api/visits",
                   tags=["visits"], dependencies=[Depends(validate_current_token)])


@router.get("/all", response_model=List[VisitOut])
def get_visits(
    lead_id: Optional[UUID] = None,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_visits(db, current_user.org_id, lead_id)


@router.post("/", response_model=VisitOut)
def create_visit(
    visit: VisitCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_visit(db, visit, current_user.org_id)


@router.put("/{visit_id}/measurements", response_model=VisitOut)
def record_visit_measurements(
    visit_id: UUID,
    update: VisitMeasurementsUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    db_visit = crud.record_visit_measurements(db, visit_id, update, current_user.org_id)
    if not db_visit:
        raise HTTPException(status_code=404, detail="Visit not found")
    return db_visit


@router.put("/{visit_id}/status", response_model=VisitOut)
def update_visit_status(
    visit_id: UUID,
    update: VisitStatusUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    db_visit = crud.update_visit_status(db, visit_id, update, current_user.org_id)
    if not db_visit:
        raise HTTPException(status_code=404, detail="Visit not found")
    return db_visit
