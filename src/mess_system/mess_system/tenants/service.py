from __future__ import annotations

from contextlib import nullcontext
from typing import Any, Callable, ContextManager, Mapping, Optional, Union

from ..audit.service import AuditLog
from ..common.validators import require_hour
from ..core.constants import DEFAULT_MEAL_TIMES
from ..core.enums import HistoryType, MealType
from ..core.exceptions import NotFoundError, ValidationError
from .model import MealWindow, Tenant, TenantSettings
from .repository import TenantRepository


def parse_settings(payload: Mapping[str, Any]) -> TenantSettings:
    """Structural check only: both meals present, hours within 0-23.

    Windows are not cross-checked; ``start > end`` is stored as given.
    """
    meal_times = payload.get("mealTimes") if isinstance(payload, Mapping) else None
    if not isinstance(meal_times, Mapping):
        raise ValidationError("mealTimes is required")

    windows = {}
    for meal in MealType:
        raw = meal_times.get(meal.value)
        if not isinstance(raw, Mapping):
            raise ValidationError(f"mealTimes.{meal.value} is required")
        windows[meal] = MealWindow(
            start=require_hour(raw.get("start"), f"{meal.value} start"),
            end=require_hour(raw.get("end"), f"{meal.value} end"),
        )
    return TenantSettings(meal_times=windows)


class TenantService:
    """Use case: read and change tenant-scoped configuration."""

    def __init__(
        self,
        tenants: TenantRepository,
        audit: AuditLog,
        *,
        unit_of_work: Optional[Callable[[], ContextManager]] = None,
    ):
        self._tenants = tenants
        self._audit = audit
        self._unit_of_work = unit_of_work or nullcontext

    def get(self, tenant_id: str) -> Optional[Tenant]:
        return self._tenants.get_by_id(tenant_id)

    def get_settings(self, tenant_id: str) -> Optional[TenantSettings]:
        tenant = self._tenants.get_by_id(tenant_id)
        return tenant.settings if tenant else None

    def update_settings(
        self,
        tenant_id: str,
        new_settings: Union[TenantSettings, Mapping[str, Any]],
        actor_id: str,
    ) -> TenantSettings:
        settings = new_settings if isinstance(new_settings, TenantSettings) else parse_settings(new_settings)

        with self._unit_of_work():
            if not self._tenants.update_settings(tenant_id, settings):
                raise NotFoundError("Tenant not found")
            self._audit.record(
                HistoryType.SYSTEM,
                "Updated meal time settings.",
                actor_id=actor_id,
                tenant_id=tenant_id,
            )
        return settings


def default_settings() -> TenantSettings:
    """A fresh snapshot of the system default schedule."""
    return TenantSettings(
        meal_times={meal: MealWindow(start=w["start"], end=w["end"]) for meal, w in DEFAULT_MEAL_TIMES.items()}
    )
