from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import format_timestamp, parse_timestamp
from ..core.enums import HistoryType
from ..storage.document import JsonDocumentStore
from ..storage.json_base import Row
from .model import HistoryEntry
from .repository import HistoryRepository


def _from_row(row: Row) -> HistoryEntry:
    return HistoryEntry(
        entry_id=row["id"],
        type=HistoryType(row["type"]),
        description=row["description"],
        timestamp=parse_timestamp(row["timestamp"]),
        actor_id=row["actorId"],
        tenant_id=row["tenantId"],
    )


class JsonHistoryRepository(HistoryRepository):
    def __init__(self, store: JsonDocumentStore):
        self._store = store

    def append(self, entry: HistoryEntry) -> None:
        with self._store.transaction() as doc:
            doc["history"].append(
                {
                    "id": entry.entry_id,
                    "type": entry.type.value,
                    "description": entry.description,
                    "timestamp": format_timestamp(entry.timestamp),
                    "actorId": entry.actor_id,
                    "tenantId": entry.tenant_id,
                }
            )

    def list_for_tenant(self, tenant_id: str, *, limit: Optional[int] = None) -> Sequence[HistoryEntry]:
        with self._store.read() as doc:
            rows = [r for r in reversed(doc["history"]) if r["tenantId"] == tenant_id]
            return [_from_row(r) for r in rows[:limit]]

    def list_all(self, *, limit: Optional[int] = None) -> Sequence[HistoryEntry]:
        with self._store.read() as doc:
            rows = list(reversed(doc["history"]))
            return [_from_row(r) for r in rows[:limit]]
