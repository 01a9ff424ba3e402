from __future__ import annotations

from datetime import date
from typing import Optional, Protocol

from ..core.enums import MealType
from .model import Menu


class MenuRepository(Protocol):
    def get(self, tenant_id: str, menu_date: date) -> Optional[Menu]:
        raise NotImplementedError

    def set_dish(self, tenant_id: str, menu_date: date, meal: MealType, dish: str) -> bool:
        """Upsert one dish. Return False when the stored dish was already ``dish``."""

        raise NotImplementedError
