"""
Money arithmetic.

All amounts are decimal.Decimal with two places, rounded half-up.
$10.50 = Decimal("10.50"). Floats never take part in arithmetic: a float that
arrives from JSON or a form is converted through its shortest repr first, so
0.1 becomes Decimal("0.1") and not 0.1000000000000000055511151231257827.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

MoneyInput = Decimal | int | float | str


def to_decimal(value: MoneyInput) -> Decimal:
    """
    Convert an incoming amount to Decimal without rounding.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a monetary value: {value!r}")

    if isinstance(value, float):
        value = repr(value)

    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError):
        raise ValueError(f"Not a monetary value: {value!r}")

    if not result.is_finite():
        raise ValueError(f"Not a monetary value: {value!r}")

    return result


def round2(value: MoneyInput) -> Decimal:
    """Round to whole cents, half-up."""
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_currency(amount: MoneyInput, symbol: str = "$") -> str:
    """
    Format an amount for display, e.g. ``$1,234.50`` or ``-$5.00``.
    """
    rounded = round2(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{abs(rounded):,.2f}"
