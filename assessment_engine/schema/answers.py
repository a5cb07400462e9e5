"""
Answer value helpers shared by validation, scoring, insights and rendering.

Answers arrive from the rendering layer as strings, numbers or lists of
strings. Nothing here raises for an unexpected type.
"""

import math
from typing import Any, Optional, Union


def is_blank(value: Any) -> bool:
    """True for absent, empty or whitespace-only strings and empty selections."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set, frozenset)):
        return len(value) == 0
    return False


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a finite number.

    Returns None for booleans, NaN, infinities, non-numeric text and ints
    too large to convert to a float.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return None
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def format_number(value: float) -> str:
    """120.0 -> '120', 24.25 -> '24.25'."""
    number: Union[int, float] = value
    if float(value).is_integer():
        number = int(value)
    return str(number)
