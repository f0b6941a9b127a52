"""
Unit conversion helpers for rate quoting.

Decimal arithmetic with ROUND_HALF_UP is used throughout so that values such
as 19.99 convert to exactly 1999 minor units. All functions are total:
inputs outside +/-1e60 are treated like non-numeric input.
"""
from decimal import Context, Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Any

GRAMS_PER_OUNCE = Decimal("28.3495")

# ShipStation rejects zero-weight shipments
MIN_WEIGHT_OUNCES = 0.1

MAX_MAGNITUDE = 60

# Wide enough that every in-range value quantizes without InvalidOperation
_CONTEXT = Context(prec=MAX_MAGNITUDE * 2, rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Decimal:
    """
    Coerce a number-like value to Decimal.

    Anything non-numeric (None, "", "abc", NaN, bools) or out of range
    becomes 0.
    """
    if value is None or isinstance(value, bool):
        return Decimal(0)
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal(0)
    if not result.is_finite() or abs(result.adjusted()) > MAX_MAGNITUDE:
        return Decimal(0)
    return result


def grams_to_ounces(grams: Any) -> float:
    """
    Convert grams to ounces, rounded to 2 decimals, minimum 0.1 oz.

    Negative and non-numeric inputs are treated as 0 and return the floor.
    """
    value = max(to_decimal(grams), Decimal(0))
    with localcontext(_CONTEXT):
        ounces = (value / GRAMS_PER_OUNCE).quantize(Decimal("0.01"))
    return max(MIN_WEIGHT_OUNCES, float(ounces))


def major_to_minor(amount: Any) -> int:
    """
    Convert a major currency amount (dollars) to minor units (cents).

    Rounds half away from zero and preserves sign: -1 -> -100.
    """
    with localcontext(_CONTEXT):
        return int((to_decimal(amount) * 100).quantize(Decimal("1")))


def apply_markup(minor_amount: int, percent: Any) -> int:
    """Scale a minor-unit price by (1 + percent/100) and round to an integer."""
    with localcontext(_CONTEXT):
        factor = 1 + to_decimal(percent) / 100
        return int((to_decimal(minor_amount) * factor).quantize(Decimal("1")))
