from __future__ import annotations

from datetime import date
from typing import Optional

from ..common.datetime_utils import format_date, parse_iso_date
from ..core.enums import MealType
from ..storage.document import JsonDocumentStore
from ..storage.json_base import Row, find_one
from .model import Menu
from .repository import MenuRepository


def _from_row(row: Row) -> Menu:
    return Menu(
        tenant_id=row["tenantId"],
        date=parse_iso_date(row["date"]),
        dishes={meal: row[meal.value] for meal in MealType if row.get(meal.value)},
    )


class JsonMenuRepository(MenuRepository):
    def __init__(self, store: JsonDocumentStore):
        self._store = store

    def get(self, tenant_id: str, menu_date: date) -> Optional[Menu]:
        day = format_date(menu_date)
        with self._store.read() as doc:
            row = find_one(doc["menus"], lambda r: r["date"] == day and r["tenantId"] == tenant_id)
            return _from_row(row) if row else None

    def set_dish(self, tenant_id: str, menu_date: date, meal: MealType, dish: str) -> bool:
        day = format_date(menu_date)
        with self._store.transaction() as doc:
            row = find_one(doc["menus"], lambda r: r["date"] == day and r["tenantId"] == tenant_id)
            if row is None:
                doc["menus"].append({"date": day, "tenantId": tenant_id, meal.value: dish})
                return True
            if row.get(meal.value) == dish:
                return False
            row[meal.value] = dish
            return True
