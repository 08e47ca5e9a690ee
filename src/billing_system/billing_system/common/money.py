from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from ..core.constants import WHOLE_UNIT


def to_decimal(value: Any, *, default: Decimal = Decimal("0")) -> Decimal:
    """Coerce numbers, numeric strings and None to Decimal.

    Floats go through ``str`` so 0.1 stays 0.1.
    """
    if value is None or value == "":
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a money value")
    if isinstance(value, float):
        return Decimal(str(value))
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise ValueError(f"Not a number: {value!r}") from exc


def round_half_up(value: Decimal) -> Decimal:
    """Round to a whole currency unit, halves away from zero."""
    return value.quantize(WHOLE_UNIT, rounding=ROUND_HALF_UP)
