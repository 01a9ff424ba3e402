from __future__ import annotations

from contextlib import nullcontext
from datetime import datetime
from typing import Any, Callable, ContextManager, Optional, Sequence, Union

from ..audit.service import AuditLog
from ..common.datetime_utils import now_local
from ..common.ids import new_id
from ..common.money import money_sum
from ..common.validators import require_non_empty, require_positive_amount
from ..core.constants import CURRENCY_LABEL
from ..core.enums import CashTransactionType, HistoryType
from .model import CashTotals, CashTransaction
from .repository import CashTransactionRepository


class CashDrawerService:
    """Use case: cash given to / returned by the cook. Independent of user billing."""

    def __init__(
        self,
        transactions: CashTransactionRepository,
        audit: AuditLog,
        *,
        unit_of_work: Optional[Callable[[], ContextManager]] = None,
    ):
        self._transactions = transactions
        self._audit = audit
        self._unit_of_work = unit_of_work or nullcontext

    def add_transaction(
        self,
        type: Union[CashTransactionType, str],
        amount: Any,
        admin_id: str,
        tenant_id: str,
        reason: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> CashTransaction:
        tx_type = CashTransactionType(type)
        value = require_positive_amount(amount)
        if tx_type == CashTransactionType.ADJUSTMENT:
            reason = require_non_empty(reason, "Reason")
        else:
            reason = (reason or "").strip() or None

        tx = CashTransaction(
            tx_id=new_id("cook-tx"),
            tenant_id=tenant_id,
            type=tx_type,
            amount=value,
            timestamp=now or now_local(),
            admin_id=admin_id,
            reason=reason,
        )
        with self._unit_of_work():
            self._transactions.add(tx)
            self._audit.record(
                HistoryType.FINANCIAL_ADMIN,
                f"Cook transaction: {tx_type.value} {CURRENCY_LABEL} {value}.",
                actor_id=admin_id,
                tenant_id=tenant_id,
                now=tx.timestamp,
            )
        return tx

    def list_for_tenant(self, tenant_id: str) -> Sequence[CashTransaction]:
        return self._transactions.list_for_tenant(tenant_id)

    def totals(self, tenant_id: str) -> CashTotals:
        txs = self._transactions.list_for_tenant(tenant_id)
        return CashTotals(
            given=money_sum(t.amount for t in txs if t.type == CashTransactionType.GIVEN),
            returned=money_sum(t.amount for t in txs if t.type == CashTransactionType.RETURNED),
            adjustment=money_sum(t.amount for t in txs if t.type == CashTransactionType.ADJUSTMENT),
        )
