from __future__ import annotations

from typing import Sequence

from ..common.datetime_utils import format_timestamp, parse_timestamp
from ..common.money import to_money
from ..core.enums import CashTransactionType
from ..storage.document import JsonDocumentStore
from ..storage.json_base import Row
from .model import CashTransaction
from .repository import CashTransactionRepository


def _from_row(row: Row) -> CashTransaction:
    return CashTransaction(
        tx_id=row["id"],
        tenant_id=row["tenantId"],
        type=CashTransactionType(row["type"]),
        amount=to_money(row["amount"]),
        timestamp=parse_timestamp(row["timestamp"]),
        admin_id=row["adminId"],
        reason=row.get("reason"),
    )


class JsonCashTransactionRepository(CashTransactionRepository):
    def __init__(self, store: JsonDocumentStore):
        self._store = store

    def add(self, tx: CashTransaction) -> None:
        row: Row = {
            "id": tx.tx_id,
            "type": tx.type.value,
            "amount": str(tx.amount),
            "timestamp": format_timestamp(tx.timestamp),
            "adminId": tx.admin_id,
            "tenantId": tx.tenant_id,
        }
        if tx.reason:
            row["reason"] = tx.reason
        with self._store.transaction() as doc:
            doc["cookTransactions"].append(row)

    def list_for_tenant(self, tenant_id: str) -> Sequence[CashTransaction]:
        with self._store.read() as doc:
            return [_from_row(r) for r in reversed(doc["cookTransactions"]) if r["tenantId"] == tenant_id]
