from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from ..core.enums import MealType


@dataclass(frozen=True)
class MealWindow:
    """Marking window ``[start, end)`` in whole local hours.

    A window with ``start > end`` is accepted and simply never opens.
    """

    start: int
    end: int

    def contains(self, hour: int) -> bool:
        return self.start <= hour < self.end


@dataclass(frozen=True)
class TenantSettings:
    meal_times: Mapping[MealType, MealWindow]

    def window_for(self, meal: MealType) -> Optional[MealWindow]:
        return self.meal_times.get(meal)


@dataclass(frozen=True)
class Tenant:
    """Domain entity: an isolated mess with its own billing."""

    tenant_id: str
    name: str
    owner_id: str
    settings: Optional[TenantSettings]
