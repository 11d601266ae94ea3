"""
Quantity rules for BOM lines.

A rule is stored as free text on the BOM line ("area * 1.05", "fixed: 2",
"perimetro*1.2") and is parsed into one of three shapes:

    FixedQuantity(amount)              -> amount, whatever the measurements
    ScaledQuantity(variable, factor)   -> measurement[variable] * factor
    UnrecognizedQuantity(raw)          -> 0

Parsing is lenient so stored rules never block a calculation. Template save
uses ``validate_formula`` instead, which rejects rules that would silently
evaluate to zero.
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_CEILING
from typing import Dict, Mapping, Optional, Union

from pydantic import BaseModel

NUMBER_PATTERN = re.compile(r"^\s*([-+]?(?:\d+(?:\.\d*)?|\.\d+))")

# checked in this order, first keyword found in the rule wins
VARIABLE_KEYWORDS = (
    ("area", ("area",)),
    ("perimeter", ("perimeter", "perimetro")),
    ("width", ("width", "largura")),
    ("height", ("height", "altura")),
)

CENT = Decimal("0.01")
ZERO = Decimal("0")
ONE = Decimal("1")
# largest quantity a Numeric(14, 3) column holds at cent precision
MAX_QUANTITY = Decimal("99999999999.99")


class FixedQuantity(BaseModel):
    model_config = {"frozen": True}

    amount: Decimal


class ScaledQuantity(BaseModel):
    model_config = {"frozen": True}

    variable: str
    factor: Decimal


class UnrecognizedQuantity(BaseModel):
    model_config = {"frozen": True}

    raw: str


QuantityRule = Union[FixedQuantity, ScaledQuantity, UnrecognizedQuantity]


class InvalidFormulaError(ValueError):
    pass


def to_decimal(value, default: Decimal = ZERO) -> Decimal:
    if value is None:
        return default
    try:
        # str() first so 2.4 stays 2.4 instead of its binary expansion
        number = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return default
    return number if number.is_finite() else default


def _leading_number(text: str) -> Optional[Decimal]:
    match = NUMBER_PATTERN.match(text)
    if not match:
        return None
    return Decimal(match.group(1))


def _multiplier(formula: str) -> Decimal:
    if "*" not in formula:
        return ONE
    factor = _leading_number(formula.split("*")[1])
    return ONE if factor is None else factor


def parse_formula(formula: Optional[str]) -> QuantityRule:
    text = (formula or "").lower()

    if "fixed" in text:
        parts = text.split(":")
        amount = _leading_number(parts[1]) if len(parts) > 1 else None
        return FixedQuantity(amount=ONE if amount is None else amount)

    for variable, keywords in VARIABLE_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return ScaledQuantity(variable=variable, factor=_multiplier(text))

    return UnrecognizedQuantity(raw=formula or "")


def validate_formula(formula: Optional[str]) -> QuantityRule:
    """Strict variant of parse_formula for rules being saved."""
    text = (formula or "").strip().lower()
    rule = parse_formula(text)

    if isinstance(rule, UnrecognizedQuantity):
        raise InvalidFormulaError(
            f"Formula '{formula}' must use fixed, area, perimeter, width or height")

    if isinstance(rule, FixedQuantity):
        parts = text.split(":")
        if len(parts) < 2 or _leading_number(parts[1]) is None:
            raise InvalidFormulaError(f"Formula '{formula}' must look like 'fixed: <amount>'")
    elif "*" in text and _leading_number(text.split("*")[1]) is None:
        raise InvalidFormulaError(f"Formula '{formula}' has no number after '*'")

    amount = rule.amount if isinstance(rule, FixedQuantity) else rule.factor
    if amount < 0:
        raise InvalidFormulaError(f"Formula '{formula}' must not be negative")
    if amount > MAX_QUANTITY:
        raise InvalidFormulaError(f"Formula '{formula}' exceeds the largest storable quantity")

    return rule


def derive_measurements(measurements: Optional[Mapping]) -> Dict[str, Decimal]:
    measurements = measurements or {}
    width = to_decimal(measurements.get("width"))
    height = to_decimal(measurements.get("height"))

    area = measurements.get("area")
    perimeter = measurements.get("perimeter")

    return {
        "width": width,
        "height": height,
        "area": width * height if area is None else to_decimal(area),
        "perimeter": (width + height) * 2 if perimeter is None else to_decimal(perimeter),
    }


def round_up_cents(quantity: Decimal) -> Decimal:
    # clamped first, quantize cannot overflow the context precision afterwards
    quantity = min(max(quantity, ZERO), MAX_QUANTITY)
    return quantity.quantize(CENT, rounding=ROUND_CEILING)


def evaluate_rule(rule: QuantityRule, measurements: Optional[Mapping]) -> Decimal:
    if isinstance(rule, FixedQuantity):
        quantity = rule.amount
    elif isinstance(rule, ScaledQuantity):
        quantity = derive_measurements(measurements)[rule.variable] * rule.factor
    else:
        quantity = ZERO

    return round_up_cents(quantity)


def evaluate_formula(formula: Optional[str], measurements: Optional[Mapping]) -> Decimal:
    return evaluate_rule(parse_formula(formula), measurements)
