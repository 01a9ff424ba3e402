from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional

from ..core.enums import MealType


@dataclass(frozen=True)
class Menu:
    """Dishes planned for one tenant on one day."""

    tenant_id: str
    date: date
    dishes: Mapping[MealType, str] = field(default_factory=dict)

    def dish_for(self, meal: MealType) -> Optional[str]:
        return self.dishes.get(meal)
