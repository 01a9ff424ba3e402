from __future__ import annotations

import logging
from contextlib import nullcontext
from datetime import date, datetime
from typing import Callable, ContextManager, Optional, Union

from ..audit.service import AuditLog
from ..common.datetime_utils import format_date, now_local
from ..common.validators import require_non_empty
from ..core.enums import HistoryType, MealType, Role
from ..notifications.model import Notification
from ..notifications.service import NotificationService
from ..users.repository import UserRepository
from .model import Menu
from .repository import MenuRepository

logger = logging.getLogger(__name__)


class MenuService:
    """Use case: plan dishes per day and tell the tenant about changes."""

    def __init__(
        self,
        menus: MenuRepository,
        users: UserRepository,
        notifications: NotificationService,
        audit: AuditLog,
        *,
        unit_of_work: Optional[Callable[[], ContextManager]] = None,
    ):
        self._menus = menus
        self._users = users
        self._notifications = notifications
        self._audit = audit
        self._unit_of_work = unit_of_work or nullcontext

    def get_menu_for_date(self, menu_date: date, tenant_id: str) -> Optional[Menu]:
        return self._menus.get(tenant_id, menu_date)

    def _menu_audience(self, tenant_id: str) -> list[str]:
        recipients = [u.user_id for u in self._users.list_for_tenant(tenant_id, role=Role.STUDENT)]
        cooks = self._users.list_for_tenant(tenant_id, role=Role.COOK)
        if cooks:
            recipients.append(cooks[0].user_id)
        return recipients

    def set_menu(
        self,
        menu_date: date,
        meal: Union[MealType, str],
        dish: str,
        actor_id: str,
        tenant_id: str,
        *,
        now: Optional[datetime] = None,
    ) -> Optional[Notification]:
        """Set the dish for one meal.

        Returns the fan-out notification, or ``None`` when nothing changed or
        nobody in the tenant can receive it.
        """
        meal = MealType(meal)
        dish = require_non_empty(dish, "Dish")
        now = now or now_local()
        day = format_date(menu_date)

        with self._unit_of_work():
            if not self._menus.set_dish(tenant_id, menu_date, meal, dish):
                logger.debug("Menu for %s %s unchanged", day, meal.value)
                return None

            notification = None
            recipients = self._menu_audience(tenant_id)
            if recipients:
                notification = self._notifications.send(
                    f'Menu for {meal.value} on {menu_date.strftime("%d %b %Y")} is updated to: "{dish}".',
                    recipients,
                    actor_id,
                    tenant_id,
                    description=f"Sent menu update notification for {day} {meal.value}.",
                    now=now,
                )
            self._audit.record(
                HistoryType.MENU_MANAGEMENT,
                f'Set {meal.value} menu to "{dish}" for {day}.',
                actor_id=actor_id,
                tenant_id=tenant_id,
                now=now,
            )
        return notification
