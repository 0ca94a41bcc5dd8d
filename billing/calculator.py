"""
Line item calculator.

Each subtotal is rounded to cents before summing so totals do not drift
across many line items, and so the same line items always produce the same
total no matter who computes it.
"""

from decimal import Decimal
from typing import Any, Iterable, Mapping

from billing.errors import InvalidInputError
from billing.money import ZERO, round2, to_decimal


def _field(item: Any, *names: str) -> Any:
    """Read the first present field from a model or a plain mapping."""
    for name in names:
        if isinstance(item, Mapping):
            if name in item:
                return item[name]
        elif hasattr(item, name):
            return getattr(item, name)
    raise InvalidInputError(f"Line item is missing '{names[0]}'")


def subtotal(item: Any) -> Decimal:
    """
    Compute a line item's subtotal: quantity * unit price, rounded to cents.

    Args:
        item: LineItem / LineItemCreate, or a mapping with ``quantity`` and
            ``unit_price`` (or ``unitPrice``) as it comes from a form row

    Returns:
        Subtotal as Decimal with two places

    Raises:
        InvalidInputError: If quantity is below 1, not a whole number, or
            unit price is negative or not a number
    """
    quantity = _field(item, "quantity")
    unit_price = _field(item, "unit_price", "unitPrice")

    if isinstance(quantity, bool) or not isinstance(quantity, int):
        try:
            quantity_value = to_decimal(quantity)
        except ValueError:
            raise InvalidInputError(f"Quantity must be a whole number, got {quantity!r}")
        if quantity_value != quantity_value.to_integral_value():
            raise InvalidInputError(f"Quantity must be a whole number, got {quantity!r}")
        quantity = int(quantity_value)

    if quantity < 1:
        raise InvalidInputError(f"Quantity must be at least 1, got {quantity}")

    try:
        price = to_decimal(unit_price)
    except ValueError:
        raise InvalidInputError(f"Unit price must be a number, got {unit_price!r}")

    if price < 0:
        raise InvalidInputError(f"Unit price must be >= 0, got {price}")

    return round2(price * quantity)


def invoice_total(items: Iterable[Any]) -> Decimal:
    """
    Sum of rounded subtotals, rounded to cents.

    Returns 0.00 for no items. Requiring at least one item is the balance
    model's job, not this function's.

    Raises:
        InvalidInputError: If any line item is malformed
    """
    total = ZERO
    for item in items:
        total += subtotal(item)
    return round2(total)
