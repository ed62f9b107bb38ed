# tailor/utils/numbers.py

import math
from typing import Any


def to_int(value: Any, default: int = 0) -> int:
    """
    Coerce form input to an int, truncating decimals.
    Anything unparseable ("", None, "abc", NaN) becomes `default`.
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return int(number)


def to_amount(value: Any, default: float = 0) -> float:
    """
    Coerce form input to a money amount.
    Whole amounts come back as int so totals print without a trailing ".0".
    """
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    if number.is_integer():
        return int(number)
    return number
