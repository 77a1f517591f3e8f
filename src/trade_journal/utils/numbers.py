"""Lenient number parsing and half-up rounding for form-style inputs."""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation


def parse_number(value: object) -> float | None:
    """Parse a form value into a finite float.

    Returns None for missing, blank, non-numeric or non-finite input. Booleans
    are not numbers here.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round like a pocket calculator: halves go away from zero."""
    if not math.isfinite(value):
        return value
    quantum = Decimal(1).scaleb(-ndigits)
    try:
        rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        return round(value, ndigits)
    return float(rounded)


def round_money(value: float) -> float:
    """Round a monetary amount to cents."""
    return round_half_up(value, 2)
