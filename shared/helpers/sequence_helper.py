from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

FIRST_SEQUENCE_NUMBER = 1000


def next_sequence_number(db: Session, number_column, org_column, org_id: UUID) -> int:
    """Next per-org document number (quotes, orders), starting at 1000."""
    current = db.query(func.max(number_column)).filter(org_column == org_id).scalar()
    if current is None:
        return FIRST_SEQUENCE_NUMBER
    return int(current) + 1
