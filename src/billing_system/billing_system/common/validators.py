from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(field_name, f"{field_name} must not be empty")
    return value.strip()


def require_positive(value: Decimal, field_name: str, *, error_field: str | None = None) -> Decimal:
    if value <= 0:
        raise ValidationError(error_field or field_name, f"{field_name} must be greater than 0")
    return value


def require_non_negative(value: Decimal, field_name: str, *, error_field: str | None = None) -> Decimal:
    if value < 0:
        raise ValidationError(error_field or field_name, f"{field_name} must not be negative")
    return value


def parse_int(value, field_name: str, *, default: Optional[int], minimum: int = 1) -> Optional[int]:
    """Query-string integers; blank means ``default``."""
    if value is None or str(value).strip() == "":
        return default
    try:
        n = int(str(value).strip())
    except ValueError as exc:
        raise ValidationError(field_name, f"{field_name} must be an integer") from exc
    if n < minimum:
        raise ValidationError(field_name, f"{field_name} must be at least {minimum}")
    return n


def parse_choice(enum_cls, value, field_name: str):
    """Enum member from its value; None and blank pass through as None."""
    if value is None or str(value).strip() == "":
        return None
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(field_name, f"{field_name} must be one of: {allowed}") from exc


def parse_date(value, field_name: str) -> Optional[date]:
    if value is None or str(value).strip() == "":
        return None
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError(field_name, f"{field_name} must be YYYY-MM-DD") from exc
