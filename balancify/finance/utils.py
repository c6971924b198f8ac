import math
from typing import Optional


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def safe_div(a: float, b: float, default=None):
    try:
        return a / b
    except ZeroDivisionError:
        return default


def percent_of(part: float, total: float) -> int:
    # zero totals report 0% rather than NaN
    ratio = safe_div(part, total, default=0.0)
    return round_half_up(ratio * 100)


def round_or_none(v: Optional[float], ndigits: int = 2) -> Optional[float]:
    if v is None:
        return None
    return round(v, ndigits)
