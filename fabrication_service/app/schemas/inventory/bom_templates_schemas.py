from pydantic import BaseModel, Field, field_validator
from uuid import UUID
from typing import Dict, List, Optional

from ...enum.production_enum import ServiceType
from ...crud.inventory.bom_formula import MAX_QUANTITY, InvalidFormulaError, validate_formula


class BOMItemCreate(BaseModel):
    stock_item_id: UUID
    quantity_formula: str
    unit: Optional[str] = None

    @field_validator("quantity_formula")
    @classmethod
    def check_formula(cls, value: str) -> str:
        try:
            validate_formula(value)
        except InvalidFormulaError as e:
            raise ValueError(str(e))
        return value.strip()


class BOMTemplateCreate(BaseModel):
    service_type: ServiceType
    name: str
    items: List[BOMItemCreate] = Field(default_factory=list)


class BOMTemplateUpdate(BaseModel):
    id: UUID
    name: Optional[str] = None
    service_type: Optional[ServiceType] = None
    # when given, replaces the whole line list
    items: Optional[List[BOMItemCreate]] = None


class BOMItemOut(BaseModel):
    id: UUID
    stock_item_id: UUID
    position: int
    quantity_formula: str
    unit: Optional[str] = None

    model_config = {"from_attributes": True}


class BOMTemplateOut(BaseModel):
    id: UUID
    org_id: UUID
    service_type: str
    name: str
    items: List[BOMItemOut] = []

    model_config = {"from_attributes": True}


class Measurements(BaseModel):
    width: Optional[float] = Field(None, le=float(MAX_QUANTITY))
    height: Optional[float] = Field(None, le=float(MAX_QUANTITY))
    area: Optional[float] = Field(None, le=float(MAX_QUANTITY))
    perimeter: Optional[float] = Field(None, le=float(MAX_QUANTITY))

    model_config = {"extra": "allow", "allow_inf_nan": False}

    def as_dict(self) -> Dict[str, float]:
        return {k: v for k, v in self.model_dump().items() if v is not None}


class BOMRequirementOut(BaseModel):
    stock_item_id: UUID
    stock_item_name: Optional[str] = None
    unit: Optional[str] = None
    quantity: float
    available: Optional[float] = None
    shortfall: float = 0


class BOMCalculationResponse(BaseModel):
    template_id: UUID
    service_type: str
    requirements: List[BOMRequirementOut]
