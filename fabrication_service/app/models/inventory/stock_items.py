# app/models/inventory/stock_items.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class StockItem(Base):
    __tablename__ = "stock_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False, index=True)
    name = Column(String(200), nullable=False)
    category = Column(String(32), nullable=False)
    unit = Column(String(16), default="un")
    sku = Column(String(64))
    location = Column(String(64))

    # on-hand and soft-held counters, only the stock ledger writes these
    quantity = Column(Numeric(14, 3), default=0, nullable=False)
    reserved = Column(Numeric(14, 3), default=0, nullable=False)

    min_level = Column(Numeric(14, 3), default=0, nullable=False)
    reorder_point = Column(Numeric(14, 3), default=0, nullable=False)
    lead_time_days = Column(Integer, default=0)
    cost_avg = Column(Numeric(14, 2), default=0)
    active = Column(Boolean, default=True, nullable=False)

    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    movements = relationship("StockMovement", back_populates="stock_item")
    reservations = relationship("StockReservation", back_populates="stock_item")

    @property
    def available(self):
        return (self.quantity or 0) - (self.reserved or 0)
