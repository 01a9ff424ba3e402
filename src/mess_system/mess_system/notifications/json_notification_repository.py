from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import format_timestamp, parse_timestamp
from ..storage.document import JsonDocumentStore
from ..storage.json_base import Row, find_one
from .model import Notification
from .repository import NotificationRepository


def _from_row(row: Row) -> Notification:
    return Notification(
        notification_id=row["id"],
        tenant_id=row["tenantId"],
        content=row["content"],
        recipient_ids=tuple(row.get("recipientIds", [])),
        sender_id=row["senderId"],
        timestamp=parse_timestamp(row["timestamp"]),
        read_by=frozenset(row.get("readBy", [])),
    )


class JsonNotificationRepository(NotificationRepository):
    def __init__(self, store: JsonDocumentStore):
        self._store = store

    def add(self, notification: Notification) -> None:
        with self._store.transaction() as doc:
            doc["notifications"].insert(
                0,
                {
                    "id": notification.notification_id,
                    "content": notification.content,
                    "recipientIds": list(notification.recipient_ids),
                    "senderId": notification.sender_id,
                    "timestamp": format_timestamp(notification.timestamp),
                    "readBy": sorted(notification.read_by),
                    "tenantId": notification.tenant_id,
                },
            )

    def get(self, notification_id: str) -> Optional[Notification]:
        with self._store.read() as doc:
            row = find_one(doc["notifications"], lambda r: r["id"] == notification_id)
            return _from_row(row) if row else None

    def list_for_recipient(self, user_id: str, tenant_id: str) -> Sequence[Notification]:
        with self._store.read() as doc:
            return [
                _from_row(r)
                for r in doc["notifications"]
                if r["tenantId"] == tenant_id and user_id in r.get("recipientIds", [])
            ]

    def mark_read(self, notification_id: str, user_id: str) -> bool:
        with self._store.transaction() as doc:
            row = find_one(doc["notifications"], lambda r: r["id"] == notification_id)
            if not row:
                return False
            read_by = row.setdefault("readBy", [])
            if user_id not in read_by:
                read_by.append(user_id)
            return True
