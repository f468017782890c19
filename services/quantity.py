"""Free-text quantity handling.

Listings and claims carry quantities as text such as ``"5 kg"`` or
``"10 servings"``. The first number is the amount; whatever text is left
is the unit.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from core.exceptions import ValidationError

_NUMBER = re.compile(r"-?(?:\d+(?:\.\d*)?|\.\d+)")
# Thousands separators inside a number, as in "1,000 kg".
_GROUPING = re.compile(r"(?<=\d),(?=\d{3}\b)")

ZERO = Decimal("0")


@dataclass(frozen=True)
class Quantity:
    amount: Decimal
    unit: str = ""

    def same_unit(self, other: "Quantity") -> bool:
        return self.unit.lower() == other.unit.lower()

    def __str__(self) -> str:
        return format_quantity(self.amount, self.unit)


def parse_quantity(text, field: str = "quantity") -> Quantity:
    """Parse ``"<number> <unit>"`` text into a `Quantity`.

    Raises:
        ValidationError: If the text holds no number.
    """
    if text is None:
        raise ValidationError("Quantity is required", field=field)
    text = _GROUPING.sub("", str(text).strip())
    match = _NUMBER.search(text)
    if not match:
        raise ValidationError(f"Could not read a number from quantity '{text}'", field=field)
    try:
        amount = Decimal(match.group(0))
    except InvalidOperation:
        raise ValidationError(f"Could not read a number from quantity '{text}'", field=field)
    unit = " ".join((text[:match.start()] + " " + text[match.end():]).split())
    return Quantity(amount=amount, unit=unit)


def parse_positive_quantity(text, field: str = "quantity") -> Quantity:
    """Like `parse_quantity` but rejects zero and negative amounts."""
    quantity = parse_quantity(text, field=field)
    if quantity.amount <= ZERO:
        raise ValidationError("Quantity must be greater than zero", field=field)
    return quantity


def format_quantity(amount: Decimal, unit: str = "") -> str:
    """Render an amount and unit back to text.

    Trailing zeros are dropped (``5.0`` becomes ``"5"``) and an exhausted
    quantity is rendered as a bare ``"0"``.
    """
    if amount <= ZERO:
        return "0"
    number = format(amount.normalize(), "f")
    return f"{number} {unit}" if unit else number


def remaining_quantity(original: Quantity, claimed_amounts) -> Decimal:
    """Original amount minus the sum of claimed amounts, floored at zero."""
    total = sum(claimed_amounts, ZERO)
    return max(ZERO, original.amount - total)
