from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import format_date, format_timestamp, parse_iso_date, parse_timestamp
from ..core.enums import MealType
from ..storage.document import JsonDocumentStore
from ..storage.json_base import Row, find_one, remove_where
from .model import AttendanceMark
from .repository import AttendanceRepository


def _from_row(row: Row) -> AttendanceMark:
    return AttendanceMark(
        user_id=row["userId"],
        tenant_id=row["tenantId"],
        date=parse_iso_date(row["date"]),
        meal=MealType(row["meal"]),
        marked_at=parse_timestamp(row["markedAt"]),
    )


def _key(tenant_id: str, user_id: str, meal_date: date, meal: MealType):
    day = format_date(meal_date)
    return lambda r: (
        r["tenantId"] == tenant_id and r["userId"] == user_id and r["date"] == day and r["meal"] == meal.value
    )


class JsonAttendanceRepository(AttendanceRepository):
    def __init__(self, store: JsonDocumentStore):
        self._store = store

    def get(self, *, tenant_id: str, user_id: str, meal_date: date, meal: MealType) -> Optional[AttendanceMark]:
        with self._store.read() as doc:
            row = find_one(doc["attendance"], _key(tenant_id, user_id, meal_date, meal))
            return _from_row(row) if row else None

    def list_for_date(self, tenant_id: str, meal_date: date, *, meal: Optional[MealType] = None) -> Sequence[AttendanceMark]:
        day = format_date(meal_date)
        with self._store.read() as doc:
            return [
                _from_row(r)
                for r in doc["attendance"]
                if r["tenantId"] == tenant_id and r["date"] == day and (meal is None or r["meal"] == meal.value)
            ]

    def list_for_user(self, tenant_id: str, user_id: str) -> Sequence[AttendanceMark]:
        with self._store.read() as doc:
            return [_from_row(r) for r in doc["attendance"] if r["tenantId"] == tenant_id and r["userId"] == user_id]

    def add(self, mark: AttendanceMark) -> None:
        with self._store.transaction() as doc:
            doc["attendance"].append(
                {
                    "userId": mark.user_id,
                    "date": format_date(mark.date),
                    "meal": mark.meal.value,
                    "markedAt": format_timestamp(mark.marked_at),
                    "tenantId": mark.tenant_id,
                }
            )

    def remove(self, *, tenant_id: str, user_id: str, meal_date: date, meal: MealType) -> bool:
        with self._store.transaction() as doc:
            return remove_where(doc["attendance"], _key(tenant_id, user_id, meal_date, meal)) > 0
