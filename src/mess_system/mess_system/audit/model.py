from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import HistoryType


@dataclass(frozen=True)
class HistoryEntry:
    """Audit record of one state-changing action. Never edited or deleted."""

    entry_id: str
    type: HistoryType
    description: str
    timestamp: datetime
    actor_id: str
    tenant_id: str
