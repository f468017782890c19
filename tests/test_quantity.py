"""Tests for free-text quantity parsing and formatting."""
from decimal import Decimal

import pytest

from core.exceptions import ValidationError
from services.quantity import (
    Quantity,
    format_quantity,
    parse_positive_quantity,
    parse_quantity,
    remaining_quantity,
)


@pytest.mark.parametrize("text,amount,unit", [
    ("5 kg", Decimal("5"), "kg"),
    ("10 servings", Decimal("10"), "servings"),
    ("2.5kg", Decimal("2.5"), "kg"),
    ("12", Decimal("12"), ""),
    ("  3   large boxes ", Decimal("3"), "large boxes"),
    ("1,000 kg", Decimal("1000"), "kg"),
    ("2,500.5 litres", Decimal("2500.5"), "litres"),
])
def test_parse_quantity(text, amount, unit):
    quantity = parse_quantity(text)
    assert quantity.amount == amount
    assert quantity.unit == unit


@pytest.mark.parametrize("text", ["", "some", "kg", None])
def test_parse_quantity_without_number_is_rejected(text):
    with pytest.raises(ValidationError) as exc_info:
        parse_quantity(text)
    assert exc_info.value.status_code == 400


@pytest.mark.parametrize("text", ["0 kg", "-3 kg", "0"])
def test_non_positive_quantity_is_rejected(text):
    with pytest.raises(ValidationError):
        parse_positive_quantity(text)


def test_format_drops_trailing_zeros_and_renders_zero_bare():
    assert format_quantity(Decimal("5.0"), "kg") == "5 kg"
    assert format_quantity(Decimal("2.50"), "kg") == "2.5 kg"
    assert format_quantity(Decimal("10"), "") == "10"
    assert format_quantity(Decimal("0"), "kg") == "0"
    assert str(Quantity(Decimal("100"), "servings")) == "100 servings"


def test_remaining_quantity_is_floored_at_zero():
    original = Quantity(Decimal("10"), "kg")
    assert remaining_quantity(original, [Decimal("3"), Decimal("2.5")]) == Decimal("4.5")
    assert remaining_quantity(original, [Decimal("8"), Decimal("8")]) == Decimal("0")
    assert remaining_quantity(original, []) == Decimal("10")


def test_units_compare_case_insensitively():
    assert Quantity(Decimal("1"), "KG").same_unit(Quantity(Decimal("2"), "kg"))
    assert not Quantity(Decimal("1"), "kg").same_unit(Quantity(Decimal("2"), "boxes"))
