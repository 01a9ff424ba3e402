from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import MealType
from ..storage.document import JsonDocumentStore
from ..storage.json_base import Row, find_one
from .model import MealWindow, Tenant, TenantSettings
from .repository import TenantRepository


def settings_from_row(row: Optional[Row]) -> Optional[TenantSettings]:
    if not row or not row.get("mealTimes"):
        return None
    meal_times = {}
    for meal in MealType:
        window = row["mealTimes"].get(meal.value)
        if window is not None:
            meal_times[meal] = MealWindow(start=int(window["start"]), end=int(window["end"]))
    return TenantSettings(meal_times=meal_times)


def settings_to_row(settings: TenantSettings) -> Row:
    return {
        "mealTimes": {
            meal.value: {"start": window.start, "end": window.end}
            for meal, window in settings.meal_times.items()
        }
    }


def _from_row(row: Row) -> Tenant:
    return Tenant(
        tenant_id=row["id"],
        name=row["name"],
        owner_id=row["ownerId"],
        settings=settings_from_row(row.get("settings")),
    )


class JsonTenantRepository(TenantRepository):
    def __init__(self, store: JsonDocumentStore):
        self._store = store

    def get_by_id(self, tenant_id: str) -> Optional[Tenant]:
        with self._store.read() as doc:
            row = find_one(doc["tenants"], lambda r: r["id"] == tenant_id)
            return _from_row(row) if row else None

    def list_all(self) -> Sequence[Tenant]:
        with self._store.read() as doc:
            return [_from_row(r) for r in doc["tenants"]]

    def create(self, tenant: Tenant) -> None:
        with self._store.transaction() as doc:
            doc["tenants"].append(
                {
                    "id": tenant.tenant_id,
                    "name": tenant.name,
                    "ownerId": tenant.owner_id,
                    "settings": settings_to_row(tenant.settings) if tenant.settings else None,
                }
            )

    def update_settings(self, tenant_id: str, settings: TenantSettings) -> bool:
        with self._store.transaction() as doc:
            row = find_one(doc["tenants"], lambda r: r["id"] == tenant_id)
            if not row:
                return False
            row["settings"] = settings_to_row(settings)
            return True
