from decimal import Decimal
from typing import List, Mapping, Optional
from uuid import UUID

from pydantic import BaseModel

from .bom_formula import evaluate_formula


class BOMRequirement(BaseModel):
    stock_item_id: UUID
    quantity: Decimal


def calculate_bom_requirements(template, measurements: Optional[Mapping]) -> List[BOMRequirement]:
    """
    One requirement per template line, in line order.

    Lines pointing at the same stock item are NOT merged; callers that need a
    per-item total must aggregate themselves.
    """
    return [
        BOMRequirement(
            stock_item_id=bom_item.stock_item_id,
            quantity=evaluate_formula(bom_item.quantity_formula, measurements),
        )
        for bom_item in sorted(template.items, key=lambda i: i.position or 0)
    ]
