from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import HistoryEntry


class HistoryRepository(Protocol):
    """Append-only: there is deliberately no update or delete."""

    def append(self, entry: HistoryEntry) -> None:
        raise NotImplementedError

    def list_for_tenant(self, tenant_id: str, *, limit: Optional[int] = None) -> Sequence[HistoryEntry]:
        """Newest first."""

        raise NotImplementedError

    def list_all(self, *, limit: Optional[int] = None) -> Sequence[HistoryEntry]:
        raise NotImplementedError
