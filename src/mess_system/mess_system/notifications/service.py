from __future__ import annotations

from contextlib import nullcontext
from datetime import datetime
from typing import Callable, ContextManager, Iterable, Optional, Sequence

from ..audit.service import AuditLog
from ..common.datetime_utils import now_local
from ..common.ids import new_id
from ..common.validators import require_non_empty
from ..core.enums import HistoryType
from ..core.exceptions import NotFoundError, ValidationError
from .model import Notification
from .repository import NotificationRepository


class NotificationService:
    """Use case: in-app notifications. Reading one is not an audited event."""

    def __init__(
        self,
        notifications: NotificationRepository,
        audit: AuditLog,
        *,
        unit_of_work: Optional[Callable[[], ContextManager]] = None,
    ):
        self._notifications = notifications
        self._audit = audit
        self._unit_of_work = unit_of_work or nullcontext

    def send(
        self,
        content: str,
        recipient_ids: Iterable[str],
        sender_id: str,
        tenant_id: str,
        *,
        description: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Notification:
        """Deliver ``content`` to the recipients.

        ``description`` replaces the default history line that lists the audience.
        """
        content = require_non_empty(content, "Content")
        recipients = tuple(dict.fromkeys(recipient_ids))
        if not recipients:
            raise ValidationError("At least one recipient is required")

        notification = Notification(
            notification_id=new_id("notif"),
            tenant_id=tenant_id,
            content=content,
            recipient_ids=recipients,
            sender_id=sender_id,
            timestamp=now or now_local(),
        )
        if description is None:
            if len(recipients) > 10:
                audience = f"{len(recipients)} users"
            else:
                audience = ", ".join(recipients)
            description = f"Sent notification to {audience}."

        with self._unit_of_work():
            self._notifications.add(notification)
            self._audit.record(
                HistoryType.SYSTEM,
                description,
                actor_id=sender_id,
                tenant_id=tenant_id,
                now=notification.timestamp,
            )
        return notification

    def mark_read(self, notification_id: str, user_id: str) -> None:
        if not self._notifications.mark_read(notification_id, user_id):
            raise NotFoundError("Notification not found")

    def list_for_user(self, user_id: str, tenant_id: str) -> Sequence[Notification]:
        return self._notifications.list_for_recipient(user_id, tenant_id)

    def unread_count(self, user_id: str, tenant_id: str) -> int:
        return sum(1 for n in self.list_for_user(user_id, tenant_id) if not n.is_read_by(user_id))
