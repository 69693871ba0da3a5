import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any

QUANTITY_QUANT = Decimal("0.01")
ZERO_QUANTITY = 0.0


def to_quantity(value: Any) -> float:
    """Coerce a stored quantity to a float.

    Missing, unparseable and non-finite values become 0 so a single bad row
    never breaks an aggregate.
    """
    if value is None or isinstance(value, bool):
        return ZERO_QUANTITY
    try:
        number = float(value)
    except (TypeError, ValueError):
        return ZERO_QUANTITY
    if not math.isfinite(number):
        return ZERO_QUANTITY
    return number


def format_quantity(value: Any) -> str:
    number = to_quantity(value)
    if number % 1 == 0:
        return str(int(number))
    rounded = Decimal(str(number)).quantize(QUANTITY_QUANT, rounding=ROUND_HALF_UP)
    # 5.999 rounds to a whole number and must render like one.
    if rounded == rounded.to_integral_value():
        return str(int(rounded))
    return str(rounded)


def percentage(part: float, whole: float) -> float:
    if not whole:
        return 0.0
    return part / whole * 100
