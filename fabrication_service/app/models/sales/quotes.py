# app/models/sales/quotes.py
import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Quote(Base):
    __tablename__ = "quotes"
    __table_args__ = (UniqueConstraint("org_id", "quote_number", name="uq_quotes_org_number"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False, index=True)
    lead_id = Column(Uuid, ForeignKey("leads.id", ondelete="SET NULL"), nullable=True)
    visit_id = Column(Uuid, ForeignKey("visits.id", ondelete="SET NULL"), nullable=True)
    quote_number = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False, default="RASCUNHO")
    valid_until = Column(Date, nullable=True)
    subtotal = Column(Numeric(14, 2), default=0)
    discount_value = Column(Numeric(14, 2), default=0)
    total = Column(Numeric(14, 2), default=0)
    delivery_time_days = Column(Integer, nullable=True)
    terms_text = Column(Text)
    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    lead = relationship("Lead", back_populates="quotes")
    visit = relationship("Visit")
    order = relationship("Order", back_populates="quote", uselist=False)
