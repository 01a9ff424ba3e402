from __future__ import annotations

from contextlib import nullcontext
from datetime import date, datetime
from typing import Callable, ContextManager, Optional, Sequence, Union

from ..audit.service import AuditLog
from ..common.datetime_utils import format_date, now_local
from ..core.enums import HistoryType, MealScope, MealType
from ..core.exceptions import AttendanceClosedError, NotFoundError
from ..ledger.service import LedgerService
from ..tenants.repository import TenantRepository
from ..users.repository import UserRepository
from .model import AttendanceMark, ToggleResult
from .repository import AttendanceRepository


class AttendanceService:
    """Attendance gate: marking windows and the mark/unmark toggle.

    A toggle changes the mark and its meal charge together inside one unit of
    work, so nobody observes a mark without its charge or the reverse.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        users: UserRepository,
        tenants: TenantRepository,
        ledger: LedgerService,
        audit: AuditLog,
        *,
        unit_of_work: Optional[Callable[[], ContextManager]] = None,
    ):
        self._attendance = attendance
        self._users = users
        self._tenants = tenants
        self._ledger = ledger
        self._audit = audit
        self._unit_of_work = unit_of_work or nullcontext

    def is_open(self, meal: Union[MealType, str], tenant_id: str, *, now: Optional[datetime] = None) -> bool:
        tenant = self._tenants.get_by_id(tenant_id)
        if not tenant or not tenant.settings:
            return False
        window = tenant.settings.window_for(MealType(meal))
        if not window:
            return False
        now = now or now_local()
        return window.contains(now.hour)

    def get_mark(self, user_id: str, meal_date: date, meal: Union[MealType, str]) -> Optional[AttendanceMark]:
        user = self._users.get_by_id(user_id)
        if not user:
            return None
        return self._attendance.get(tenant_id=user.tenant_id, user_id=user_id, meal_date=meal_date, meal=MealType(meal))

    def list_for_date(
        self,
        tenant_id: str,
        meal_date: date,
        meal: Optional[Union[MealType, str]] = None,
    ) -> Sequence[AttendanceMark]:
        return self._attendance.list_for_date(tenant_id, meal_date, meal=MealType(meal) if meal else None)

    def list_for_user(self, tenant_id: str, user_id: str) -> Sequence[AttendanceMark]:
        """Marks of one user, newest first."""
        marks = self._attendance.list_for_user(tenant_id, user_id)
        return sorted(marks, key=lambda m: (m.marked_at, m.date), reverse=True)

    def attendees(self, tenant_id: str, meal_date: date, scope: Union[MealScope, str]) -> list[str]:
        """Distinct user ids that attended, in first-mark order."""
        ids: list[str] = []
        for meal in MealScope(scope).meals():
            for mark in self._attendance.list_for_date(tenant_id, meal_date, meal=meal):
                if mark.user_id not in ids:
                    ids.append(mark.user_id)
        return ids

    def toggle(
        self,
        user_id: str,
        meal_date: date,
        meal: Union[MealType, str],
        actor_id: str,
        *,
        tenant_id: Optional[str] = None,
        enforce_window: bool = False,
        now: Optional[datetime] = None,
    ) -> ToggleResult:
        """Mark the meal if unmarked, unmark it otherwise.

        ``enforce_window`` refuses both directions outside the marking window
        (self-service path); administrators call with it off.
        """
        meal = MealType(meal)
        now = now or now_local()
        day = format_date(meal_date)

        with self._unit_of_work():
            user = self._users.get_by_id(user_id)
            if not user or (tenant_id is not None and user.tenant_id != tenant_id):
                raise NotFoundError("User not found")

            if enforce_window and not self.is_open(meal, user.tenant_id, now=now):
                raise AttendanceClosedError(f"{meal.value} marking window is closed.")

            existing = self._attendance.get(tenant_id=user.tenant_id, user_id=user_id, meal_date=meal_date, meal=meal)
            if existing:
                self._attendance.remove(tenant_id=user.tenant_id, user_id=user_id, meal_date=meal_date, meal=meal)
                self._ledger.retract_meal_charge(user_id, meal_date, meal)
                self._audit.record(
                    HistoryType.ATTENDANCE_MANAGEMENT,
                    f"Removed {meal.value} attendance for {user.name} on {day}.",
                    actor_id=actor_id,
                    tenant_id=user.tenant_id,
                    now=now,
                )
                return ToggleResult(marked=False)

            self._attendance.add(
                AttendanceMark(user_id=user_id, tenant_id=user.tenant_id, date=meal_date, meal=meal, marked_at=now)
            )
            entry = self._ledger.charge_meal(user, meal_date, meal, now=now)
            self._audit.record(
                HistoryType.ATTENDANCE_MANAGEMENT,
                f"Marked {meal.value} attendance for {user.name} on {day}.",
                actor_id=actor_id,
                tenant_id=user.tenant_id,
                now=now,
            )
            return ToggleResult(marked=True, charged_entry_id=entry.entry_id if entry else None)
