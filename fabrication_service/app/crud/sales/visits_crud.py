# app/crud/sales/visits_crud.py
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import not_found_response
from ...enum.sales_enum import LeadStage, VisitStatus
from ...models.sales.visits import Visit
from ...schemas.sales.visits_schemas import VisitCreate, VisitMeasurementsUpdate, VisitStatusUpdate
from .leads_crud import get_lead_by_id


def get_visits(db: Session, org_id: UUID, lead_id: Optional[UUID] = None) -> List[Visit]:
    query = db.query(Visit).filter(Visit.org_id == org_id)
    if lead_id:
        query = query.filter(Visit.lead_id == lead_id)
    return query.order_by(Visit.scheduled_at.desc()).all()


def get_visit_by_id(db: Session, visit_id: UUID, org_id: UUID) -> Optional[Visit]:
    return db.query(Visit).filter(Visit.id == visit_id, Visit.org_id == org_id).first()


def create_visit(db: Session, visit: VisitCreate, org_id: UUID) -> Visit:
    lead = get_lead_by_id(db, visit.lead_id, org_id)
    if not lead:
        return not_found_response("Lead")

    db_visit = Visit(**visit.model_dump(), org_id=org_id, status=VisitStatus.SCHEDULED.value)
    db.add(db_visit)

    # scheduling a visit moves early-stage leads forward
    if lead.stage in (LeadStage.NEW.value, LeadStage.CONTACT.value):
        lead.stage = LeadStage.VISIT.value

    db.commit()
    db.refresh(db_visit)
    return db_visit


def record_visit_measurements(
    db: Session,
    visit_id: UUID,
    update: VisitMeasurementsUpdate,
    org_id: UUID
) -> Optional[Visit]:
    db_visit = get_visit_by_id(db, visit_id, org_id)
    if not db_visit:
        return None

    db_visit.measurements = update.measurements.as_dict()
    if update.checklist is not None:
        db_visit.checklist = update.checklist
    db_visit.status = VisitStatus.COMPLETED.value

    db.commit()
    db.refresh(db_visit)
    return db_visit


def update_visit_status(db: Session, visit_id: UUID, update: VisitStatusUpdate, org_id: UUID) -> Optional[Visit]:
    db_visit = get_visit_by_id(db, visit_id, org_id)
    if not db_visit:
        return None

    db_visit.status = update.status.value
    if update.scheduled_at is not None:
        db_visit.scheduled_at = update.scheduled_at

    db.commit()
    db.refresh(db_visit)
    return db_visit
