from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Notification


class NotificationRepository(Protocol):
    def add(self, notification: Notification) -> None:
        raise NotImplementedError

    def get(self, notification_id: str) -> Optional[Notification]:
        raise NotImplementedError

    def list_for_recipient(self, user_id: str, tenant_id: str) -> Sequence[Notification]:
        """Newest first."""

        raise NotImplementedError

    def mark_read(self, notification_id: str, user_id: str) -> bool:
        """Return False when the notification does not exist."""

        raise NotImplementedError
