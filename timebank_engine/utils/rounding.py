"""Numeric helpers shared by the credit and scoring calculations"""

import math
from decimal import Decimal, ROUND_HALF_UP, localcontext

# Enough digits for the largest finite float plus the fractional places
_PRECISION = 400


def round_half_up(value: float, places: int = 0) -> float:
    """Round halves away from zero (2.675 -> 2.68, 0.5 -> 1), unlike built-in round()"""
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-places)
    with localcontext() as ctx:
        ctx.prec = _PRECISION
        return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def clamp(value: float, low: float, high: float) -> float:
    """Bound value to the closed interval [low, high]"""
    return max(low, min(high, value))
