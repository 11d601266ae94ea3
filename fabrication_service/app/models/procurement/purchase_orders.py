# app/models/procurement/purchase_orders.py
import uuid
from sqlalchemy import Column, Date, DateTime, ForeignKey, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class PurchaseOrder(Base):
    __tablename__ = "purchase_orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False, index=True)
    supplier_name = Column(String(200), nullable=False)
    status = Column(String(16), nullable=False, default="RASCUNHO")
    expected_delivery_date = Column(Date, nullable=True)
    total_estimated = Column(Numeric(14, 2), default=0)
    notes = Column(Text)
    received_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    lines = relationship("PurchaseOrderLine", back_populates="purchase_order", cascade="all, delete-orphan")


class PurchaseOrderLine(Base):
    __tablename__ = "purchase_order_lines"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False)
    purchase_order_id = Column(
        Uuid,
        ForeignKey("purchase_orders.id", ondelete="CASCADE"),
        nullable=False
    )
    stock_item_id = Column(Uuid, ForeignKey("stock_items.id"), nullable=False)
    quantity = Column(Numeric(14, 3), nullable=False)
    unit_cost_estimated = Column(Numeric(14, 2), nullable=True)

    purchase_order = relationship("PurchaseOrder", back_populates="lines")
    stock_item = relationship("StockItem")
