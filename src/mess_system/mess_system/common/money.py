from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable

from ..core.exceptions import ValidationError

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_money(value: Any, field_name: str = "Amount") -> Decimal:
    """Convert user or stored input to Decimal.

    Floats go through ``str`` so 0.1 stays 0.1 instead of its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"{field_name} is not a valid amount")
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field_name} is not a valid amount")
    if not result.is_finite():
        raise ValidationError(f"{field_name} is not a valid amount")
    return result


def money_sum(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)
