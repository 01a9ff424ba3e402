from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Mapping, Sequence


class ProrationCalculator(ABC):
    """Calculator interface (Strategy Pattern for splitting shared charges)."""

    @abstractmethod
    def split(self, total: Decimal, user_ids: Sequence[str]) -> Mapping[str, Decimal]:
        raise NotImplementedError
