from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import UUID

from pydantic import BaseModel

from ...enum.inventory_enum import StockHealth
from .bom_formula import to_decimal


class PurchaseSuggestion(BaseModel):
    item_id: UUID
    name: str
    unit: Optional[str] = None
    current: Decimal
    reserved: Decimal
    available: Decimal
    reorder_point: Decimal
    suggested_buy: Decimal


def available_quantity(item) -> Decimal:
    return to_decimal(item.quantity) - to_decimal(item.reserved)


def get_stock_health(item) -> StockHealth:
    available = available_quantity(item)
    if available <= 0:
        return StockHealth.CRITICAL
    if available <= to_decimal(item.min_level):
        return StockHealth.LOW
    return StockHealth.OK


def generate_purchase_suggestions(stock: Iterable) -> List[PurchaseSuggestion]:
    """Doubling replenishment: bring available back to twice the reorder point."""
    suggestions = []
    for item in stock:
        available = available_quantity(item)
        reorder_point = to_decimal(item.reorder_point)
        if available >= reorder_point:
            continue

        suggestions.append(PurchaseSuggestion(
            item_id=item.id,
            name=item.name,
            unit=item.unit,
            current=to_decimal(item.quantity),
            reserved=to_decimal(item.reserved),
            available=available,
            reorder_point=reorder_point,
            suggested_buy=reorder_point * 2 - available,
        ))
    return suggestions
