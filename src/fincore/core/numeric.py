"""Decimal rounding helpers shared by pricing and indicator code."""

from decimal import Decimal, ROUND_HALF_UP

TWO_PLACES = Decimal("0.01")
FOUR_PLACES = Decimal("0.0001")


def round2(value: Decimal) -> Decimal:
    """Round to 2 fractional digits, half-up."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def round4(value: Decimal) -> Decimal:
    """Round to 4 fractional digits, half-up."""
    return value.quantize(FOUR_PLACES, rounding=ROUND_HALF_UP)


def to_decimal(value: float) -> Decimal:
    """Convert a float factor to Decimal through its shortest repr."""
    return Decimal(str(value))


# Stored scales for ledger amounts; total_value keeps their sum
PRICE_SCALE = 4
QUANTITY_SCALE = 8
TOTAL_VALUE_SCALE = PRICE_SCALE + QUANTITY_SCALE


def fractional_digits(value: Decimal) -> int:
    """Number of significant digits after the decimal point (1.50 -> 1)."""
    exponent = value.normalize().as_tuple().exponent
    return max(0, -exponent)
