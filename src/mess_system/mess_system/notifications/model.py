from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Tuple


@dataclass(frozen=True)
class Notification:
    notification_id: str
    tenant_id: str
    content: str
    recipient_ids: Tuple[str, ...]
    sender_id: str
    timestamp: datetime
    read_by: FrozenSet[str] = field(default_factory=frozenset)

    def is_read_by(self, user_id: str) -> bool:
        return user_id in self.read_by
