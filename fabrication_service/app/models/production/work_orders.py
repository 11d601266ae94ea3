# app/models/production/work_orders.py
import uuid
from sqlalchemy import JSON, Column, DateTime, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class WorkOrder(Base):
    __tablename__ = "work_orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False, index=True)
    order_id = Column(Uuid, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    service_type = Column(String(32), nullable=False)
    status = Column(String(16), nullable=False, default="CUTTING")
    assigned_team = Column(JSON, nullable=True)  # list of user ids
    checklist = Column(JSON, nullable=True)
    measurements = Column(JSON, nullable=True)
    finished_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    order = relationship("Order", back_populates="work_orders")
    reservations = relationship("StockReservation", back_populates="work_order")
