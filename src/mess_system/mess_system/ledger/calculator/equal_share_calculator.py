from __future__ import annotations

from decimal import Decimal
from typing import Mapping, Sequence

from .base import ProrationCalculator


class EqualShareCalculator(ProrationCalculator):
    """Standard rule: total / n for everyone, no rounding beyond Decimal precision."""

    def split(self, total: Decimal, user_ids: Sequence[str]) -> Mapping[str, Decimal]:
        if not user_ids:
            return {}
        share = total / Decimal(len(user_ids))
        return {user_id: share for user_id in user_ids}
