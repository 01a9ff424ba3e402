from __future__ import annotations

from decimal import Decimal
from typing import Any, Optional

from ..core.exceptions import ValidationError
from .money import to_money


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_positive_amount(value: Any, field_name: str = "Amount") -> Decimal:
    amount = to_money(value, field_name)
    if amount <= 0:
        raise ValidationError(f"{field_name} must be greater than zero")
    return amount


def require_hour(value: Any, field_name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValidationError(f"{field_name} must be an hour between 0 and 23")
    try:
        hour = int(value)
    except ValueError:
        raise ValidationError(f"{field_name} must be an hour between 0 and 23")
    if not 0 <= hour <= 23:
        raise ValidationError(f"{field_name} must be an hour between 0 and 23")
    return hour
