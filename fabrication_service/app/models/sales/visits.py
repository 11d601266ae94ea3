# app/models/sales/visits.py
import uuid
from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Visit(Base):
    __tablename__ = "visits"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False, index=True)
    lead_id = Column(Uuid, ForeignKey("leads.id", ondelete="SET NULL"), nullable=True)
    scheduled_at = Column(DateTime(timezone=True), nullable=False)
    assigned_user_id = Column(String(64), nullable=True)
    address_override = Column(Text)
    status = Column(String(16), nullable=False, default="AGENDADA")
    checklist = Column(JSON, nullable=True)
    measurements = Column(JSON, nullable=True)  # { "width": 3.5, "height": 2.2 }
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    lead = relationship("Lead", back_populates="visits")
