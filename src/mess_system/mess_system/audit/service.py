from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.ids import new_id
from ..core.enums import HistoryType
from .model import HistoryEntry
from .repository import HistoryRepository

logger = logging.getLogger(__name__)


class AuditLog:
    """Use case: append and read the tamper-evident history log."""

    def __init__(
        self,
        history: HistoryRepository,
        *,
        after_commit: Optional[Callable[[Callable[[], None]], None]] = None,
    ):
        self._history = history
        # Log lines wait for the surrounding transaction so rolled back commands leave none.
        self._after_commit = after_commit or (lambda callback: callback())

    def record(
        self,
        type: HistoryType,
        description: str,
        *,
        actor_id: str,
        tenant_id: str,
        now: Optional[datetime] = None,
    ) -> HistoryEntry:
        entry = HistoryEntry(
            entry_id=new_id("hist"),
            type=type,
            description=description,
            timestamp=now or now_local(),
            actor_id=actor_id,
            tenant_id=tenant_id,
        )
        self._history.append(entry)
        self._after_commit(
            lambda: logger.info("[%s] %s: %s (actor=%s)", tenant_id, type.value, description, actor_id)
        )
        return entry

    def list_for_tenant(self, tenant_id: str, *, limit: Optional[int] = None) -> Sequence[HistoryEntry]:
        return self._history.list_for_tenant(tenant_id, limit=limit)

    def list_all(self, *, limit: Optional[int] = None) -> Sequence[HistoryEntry]:
        return self._history.list_all(limit=limit)
