from __future__ import annotations

from decimal import Decimal

import pytest

from src.mess_system.mess_system.cash.service import CashDrawerService
from src.mess_system.mess_system.core.enums import CashTransactionType, HistoryType
from src.mess_system.mess_system.core.exceptions import ValidationError


class FakeCashRepo:
    def __init__(self):
        self.rows = []

    def add(self, tx):
        self.rows.append(tx)

    def list_for_tenant(self, tenant_id):
        return [t for t in reversed(self.rows) if t.tenant_id == tenant_id]


class FakeAudit:
    def __init__(self):
        self.entries = []

    def record(self, type, description, *, actor_id, tenant_id, now=None):
        self.entries.append((type, description, actor_id, tenant_id))


def _service():
    repo, audit = FakeCashRepo(), FakeAudit()
    return CashDrawerService(repo, audit), repo, audit


def test_adjustment_requires_reason():
    svc, repo, audit = _service()

    with pytest.raises(ValidationError):
        svc.add_transaction(CashTransactionType.ADJUSTMENT, 100, "admin1", "t1", reason="   ")

    assert repo.rows == []
    assert audit.entries == []


def test_given_and_returned_do_not_need_reason(fixed_now):
    svc, repo, audit = _service()

    tx = svc.add_transaction("given", "500", "admin1", "t1", now=fixed_now)

    assert tx.reason is None
    assert tx.amount == Decimal("500")
    assert audit.entries == [(HistoryType.FINANCIAL_ADMIN, "Cook transaction: given Rs. 500.", "admin1", "t1")]


@pytest.mark.parametrize("amount", [0, "-5"])
def test_non_positive_amount_is_rejected(amount):
    svc, repo, _ = _service()

    with pytest.raises(ValidationError):
        svc.add_transaction(CashTransactionType.GIVEN, amount, "admin1", "t1")
    assert repo.rows == []


def test_totals_group_by_type_per_tenant(fixed_now):
    svc, _, _ = _service()
    svc.add_transaction("given", 1000, "admin1", "t1", now=fixed_now)
    svc.add_transaction("given", 250, "admin1", "t1", now=fixed_now)
    svc.add_transaction("returned", 100, "admin1", "t1", now=fixed_now)
    svc.add_transaction("adjustment", 40, "admin1", "t1", reason="Gas cylinder", now=fixed_now)
    svc.add_transaction("given", 999, "admin2", "t2", now=fixed_now)

    totals = svc.totals("t1")

    assert totals.given == 1250
    assert totals.returned == 100
    assert totals.adjustment == 40
    assert [t.type.value for t in svc.list_for_tenant("t1")] == ["adjustment", "returned", "given", "given"]


def test_cash_drawer_is_persisted_in_the_store(container, fixed_now):
    container.cash_service.add_transaction("returned", "75.25", "admin1", "tenant1", now=fixed_now)

    (row,) = container.store.snapshot()["cookTransactions"]
    assert row["amount"] == "75.25"
    assert row["type"] == "returned"
    assert container.cash_service.totals("tenant1").returned == Decimal("75.25")
