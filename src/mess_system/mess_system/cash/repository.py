from __future__ import annotations

from typing import Protocol, Sequence

from .model import CashTransaction


class CashTransactionRepository(Protocol):
    def add(self, tx: CashTransaction) -> None:
        raise NotImplementedError

    def list_for_tenant(self, tenant_id: str) -> Sequence[CashTransaction]:
        """Newest first."""

        raise NotImplementedError
