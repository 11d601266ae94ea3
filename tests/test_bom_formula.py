import math
from decimal import Decimal

import pytest

from fabrication_service.app.crud.inventory.bom_formula import (
    FixedQuantity,
    InvalidFormulaError,
    MAX_QUANTITY,
    ScaledQuantity,
    UnrecognizedQuantity,
    derive_measurements,
    evaluate_formula,
    parse_formula,
    validate_formula,
)


@pytest.mark.parametrize("width,height,factor", [
    (3.5, 2.4, "1.1"),
    (1, 1, "1"),
    (2.25, 1.8, "1.05"),
    (10, 0.33, "2"),
])
def test_area_formula_uses_width_times_height(width, height, factor):
    expected = (Decimal(str(width)) * Decimal(str(height)) * Decimal(factor))
    expected = expected.quantize(Decimal("0.01"), rounding="ROUND_CEILING")
    assert evaluate_formula(f"area * {factor}", {"width": width, "height": height}) == expected


def test_gate_sheet_requirement_is_exact():
    assert evaluate_formula("area * 1.1", {"width": 3.5, "height": 2.4}) == Decimal("9.24")


@pytest.mark.parametrize("measurements", [None, {}, {"width": 3}, {"width": 100, "height": 50, "area": 7}])
def test_fixed_ignores_measurements(measurements):
    assert evaluate_formula("fixed: 3", measurements) == Decimal("3")


def test_fixed_without_amount_defaults_to_one():
    assert parse_formula("fixed") == FixedQuantity(amount=Decimal("1"))
    assert evaluate_formula("fixed", {}) == Decimal("1")


def test_explicit_area_and_perimeter_win_over_derived():
    derived = derive_measurements({"width": 2, "height": 3, "area": 10, "perimeter": 0})
    assert derived["area"] == Decimal("10")
    assert derived["perimeter"] == Decimal("0")


def test_perimeter_is_derived_from_width_and_height():
    assert evaluate_formula("perimeter * 1.2", {"width": 3, "height": 2}) == Decimal("12.00")


def test_portuguese_aliases():
    assert parse_formula("perimetro*1.2") == ScaledQuantity(variable="perimeter", factor=Decimal("1.2"))
    assert parse_formula("largura * 2") == ScaledQuantity(variable="width", factor=Decimal("2"))
    assert parse_formula("ALTURA") == ScaledQuantity(variable="height", factor=Decimal("1"))


def test_area_takes_precedence_over_other_keywords():
    # "area" is checked first even when another keyword appears too
    assert parse_formula("width area * 2").variable == "area"


def test_unrecognized_formula_yields_zero():
    assert isinstance(parse_formula("two bars"), UnrecognizedQuantity)
    assert evaluate_formula("two bars", {"width": 3, "height": 2}) == Decimal("0")
    assert evaluate_formula(None, {"width": 3}) == Decimal("0")


def test_negative_results_are_clamped():
    assert evaluate_formula("width * -2", {"width": 3}) == Decimal("0")


def test_results_round_up_to_cents():
    assert evaluate_formula("width * 1", {"width": 1.001}) == Decimal("1.01")


@pytest.mark.parametrize("formula", ["fixed: 2", "area * 1.05", "perimetro*1.2", "width", "fixed:0"])
def test_validate_accepts_well_formed_rules(formula):
    validate_formula(formula)


@pytest.mark.parametrize("formula", [
    "", "two bars", "fixed", "fixed: x", "area * abc", "width * -1", "fixed: -2",
    "fixed: 99999999999999999999999999999", "area * 100000000000000",
])
def test_validate_rejects_malformed_rules(formula):
    with pytest.raises(InvalidFormulaError):
        validate_formula(formula)


@pytest.mark.parametrize("formula,measurements,expected", [
    ("area * 1.1", {"width": 1e20, "height": 1e10}, MAX_QUANTITY),
    ("perimeter * 2", {"width": 1.7e308, "height": 1.7e308}, MAX_QUANTITY),
    ("fixed: 99999999999999999999999999999", {}, MAX_QUANTITY),
    ("width", {"width": math.inf}, Decimal("0")),
    ("width", {"width": -math.inf}, Decimal("0")),
    ("width", {"width": math.nan}, Decimal("0")),
    ("area * 2", {"width": math.nan, "height": 3}, Decimal("0")),
    ("area", {"area": math.inf}, Decimal("0")),
    ("perimeter", {"width": "abc", "height": 2}, Decimal("4")),
])
def test_out_of_range_measurements_degrade_instead_of_raising(formula, measurements, expected):
    quantity = evaluate_formula(formula, measurements)
    assert isinstance(quantity, Decimal)
    assert quantity >= 0
    assert quantity == expected


def test_largest_storable_amount_is_accepted():
    validate_formula(f"fixed: {MAX_QUANTITY}")
    assert evaluate_formula(f"fixed: {MAX_QUANTITY}", None) == MAX_QUANTITY
