# app/models/inventory/stock_reservations.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base
from ...enum.inventory_enum import StockReservationStatus


class StockReservation(Base):
    __tablename__ = "stock_reservations"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False, index=True)
    work_order_id = Column(
        Uuid,
        ForeignKey("work_orders.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    stock_item_id = Column(
        Uuid,
        ForeignKey("stock_items.id", ondelete="CASCADE"),
        nullable=False
    )
    quantity_reserved = Column(Numeric(14, 3), nullable=False)
    status = Column(String(16), nullable=False, default=StockReservationStatus.RESERVED.value)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    consumed_at = Column(DateTime(timezone=True), nullable=True)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)

    work_order = relationship("WorkOrder", back_populates="reservations")
    stock_item = relationship("StockItem", back_populates="reservations")
