from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import format_date, format_timestamp, parse_iso_date, parse_timestamp
from ..common.money import to_money
from ..core.enums import BillItemType, MealType
from ..storage.document import JsonDocumentStore
from ..storage.json_base import Row, find_one, remove_where
from .model import LedgerEntry, RelatedMeal
from .repository import LedgerRepository


def _from_row(row: Row) -> LedgerEntry:
    related = row.get("relatedMeal")
    return LedgerEntry(
        entry_id=row["id"],
        user_id=row["userId"],
        tenant_id=row["tenantId"],
        type=BillItemType(row["type"]),
        description=row.get("description", ""),
        amount=to_money(row["amount"]),
        timestamp=parse_timestamp(row["timestamp"]),
        related_meal=(
            RelatedMeal(date=parse_iso_date(related["date"]), meal=MealType(related["meal"])) if related else None
        ),
    )


def _to_row(entry: LedgerEntry) -> Row:
    row: Row = {
        "id": entry.entry_id,
        "userId": entry.user_id,
        "tenantId": entry.tenant_id,
        "type": entry.type.value,
        "description": entry.description,
        "amount": str(entry.amount),
        "timestamp": format_timestamp(entry.timestamp),
    }
    if entry.related_meal:
        row["relatedMeal"] = {
            "date": format_date(entry.related_meal.date),
            "meal": entry.related_meal.meal.value,
        }
    return row


def _is_meal_entry(row: Row, user_id: str, meal_date: str, meal: str) -> bool:
    related = row.get("relatedMeal")
    return (
        row["userId"] == user_id
        and row["type"] == BillItemType.MEAL.value
        and bool(related)
        and related["date"] == meal_date
        and related["meal"] == meal
    )


class JsonLedgerRepository(LedgerRepository):
    def __init__(self, store: JsonDocumentStore):
        self._store = store

    def append(self, entries: Sequence[LedgerEntry]) -> None:
        with self._store.transaction() as doc:
            doc["billItems"].extend(_to_row(e) for e in entries)

    def list_for_user(self, user_id: str, *, tenant_id: Optional[str] = None) -> Sequence[LedgerEntry]:
        with self._store.read() as doc:
            return [
                _from_row(r)
                for r in doc["billItems"]
                if r["userId"] == user_id and (tenant_id is None or r["tenantId"] == tenant_id)
            ]

    def find_meal_entry(self, *, user_id: str, meal_date: date, meal: MealType) -> Optional[LedgerEntry]:
        day = format_date(meal_date)
        with self._store.read() as doc:
            row = find_one(doc["billItems"], lambda r: _is_meal_entry(r, user_id, day, meal.value))
            return _from_row(row) if row else None

    def retract_meal_entry(self, entry_id: str) -> bool:
        with self._store.transaction() as doc:
            removed = remove_where(
                doc["billItems"],
                lambda r: r["id"] == entry_id and r["type"] == BillItemType.MEAL.value,
            )
            return removed > 0
