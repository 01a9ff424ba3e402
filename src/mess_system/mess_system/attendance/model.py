from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import MealType


@dataclass(frozen=True)
class AttendanceMark:
    """Domain entity: presence of a mark means the user attended the meal.

    (user_id, date, meal) is the key; there is at most one mark per key.
    """

    user_id: str
    tenant_id: str
    date: date
    meal: MealType
    marked_at: datetime


@dataclass(frozen=True)
class ToggleResult:
    marked: bool
    charged_entry_id: Optional[str] = None
