# app/models/production/orders.py
import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class Order(Base):
    __tablename__ = "orders"
    __table_args__ = (UniqueConstraint("org_id", "order_number", name="uq_orders_org_number"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False, index=True)
    quote_id = Column(Uuid, ForeignKey("quotes.id", ondelete="SET NULL"), nullable=True)
    client_id = Column(Uuid, nullable=True)
    client_name = Column(String(200))
    order_number = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False, default="ABERTO")
    service_type = Column(String(32), nullable=False)
    start_date = Column(Date, nullable=True)
    expected_end_date = Column(Date, nullable=True)
    progress = Column(Integer, default=0)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    quote = relationship("Quote", back_populates="order")
    work_orders = relationship("WorkOrder", back_populates="order")
    warranties = relationship("Warranty", back_populates="order")
