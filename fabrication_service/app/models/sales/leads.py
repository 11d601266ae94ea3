# app/models/sales/leads.py
import uuid
from sqlalchemy import Boolean, Column, Date, DateTime, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Lead(Base):
    __tablename__ = "leads"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False, index=True)
    client_id = Column(Uuid, nullable=True)
    client_name = Column(String(200), nullable=False)
    phone = Column(String(32), nullable=False)
    source = Column(String(64))
    service_type = Column(String(32), nullable=False)
    stage = Column(String(24), nullable=False, default="NOVO")
    priority = Column(String(16), nullable=False, default="MEDIA")
    expected_value = Column(Numeric(14, 2))
    next_action_date = Column(Date, nullable=True)
    notes = Column(Text)

    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    visits = relationship("Visit", back_populates="lead")
    quotes = relationship("Quote", back_populates="lead")
