# app/models/inventory/stock_movements.py
import uuid
from sqlalchemy import Column, DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class StockMovement(Base):
    __tablename__ = "stock_movements"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False, index=True)
    stock_item_id = Column(
        Uuid,
        ForeignKey("stock_items.id", ondelete="CASCADE"),
        nullable=False
    )
    type = Column(String(16), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)
    cost_unit = Column(Numeric(14, 2), nullable=True)
    related_work_order_id = Column(Uuid, nullable=True)
    related_purchase_id = Column(Uuid, nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(String(64), nullable=True)  # token user id, no FK
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    stock_item = relationship("StockItem", back_populates="movements")
