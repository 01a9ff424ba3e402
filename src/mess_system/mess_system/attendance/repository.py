from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import MealType
from .model import AttendanceMark


class AttendanceRepository(Protocol):
    def get(self, *, tenant_id: str, user_id: str, meal_date: date, meal: MealType) -> Optional[AttendanceMark]:
        raise NotImplementedError

    def list_for_date(self, tenant_id: str, meal_date: date, *, meal: Optional[MealType] = None) -> Sequence[AttendanceMark]:
        """Marks in the order they were made."""

        raise NotImplementedError

    def list_for_user(self, tenant_id: str, user_id: str) -> Sequence[AttendanceMark]:
        raise NotImplementedError

    def add(self, mark: AttendanceMark) -> None:
        raise NotImplementedError

    def remove(self, *, tenant_id: str, user_id: str, meal_date: date, meal: MealType) -> bool:
        raise NotImplementedError
