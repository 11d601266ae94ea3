# app/models/inventory/bom_templates.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from shared.core.database import Base


class ServiceBOMTemplate(Base):
    __tablename__ = "service_bom_templates"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False, index=True)
    service_type = Column(String(32), nullable=False)
    name = Column(String(200), nullable=False)

    is_deleted = Column(Boolean, default=False, nullable=False)
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    items = relationship(
        "ServiceBOMItem",
        back_populates="template",
        order_by="ServiceBOMItem.position",
        cascade="all, delete-orphan",
    )


class ServiceBOMItem(Base):
    __tablename__ = "service_bom_items"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    org_id = Column(Uuid, nullable=False)
    bom_template_id = Column(
        Uuid,
        ForeignKey("service_bom_templates.id", ondelete="CASCADE"),
        nullable=False
    )
    stock_item_id = Column(Uuid, ForeignKey("stock_items.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    quantity_formula = Column(String(128), nullable=False)  # e.g. "area * 1.05", "fixed: 1"
    unit = Column(String(16), nullable=True)

    template = relationship("ServiceBOMTemplate", back_populates="items")
    stock_item = relationship("StockItem")
