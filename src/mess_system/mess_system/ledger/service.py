from __future__ import annotations

from contextlib import nullcontext
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, ContextManager, Optional, Sequence, Union

from ..attendance.repository import AttendanceRepository
from ..audit.service import AuditLog
from ..common.datetime_utils import format_date, now_local
from ..common.ids import new_id
from ..common.money import ZERO, money_sum
from ..common.validators import require_non_empty, require_positive_amount
from ..core.constants import CURRENCY_LABEL, MEAL_COST
from ..core.enums import BillItemType, HistoryType, MealScope, MealType
from ..core.exceptions import NoEligibleAttendeesError, NotFoundError
from ..users.model import AnyUser, Student, is_billable
from ..users.repository import UserRepository
from .calculator.base import ProrationCalculator
from .calculator.equal_share_calculator import EqualShareCalculator
from .model import (
    AccountSummary,
    BillPeriod,
    LedgerEntry,
    MiscChargeResult,
    PeriodSummary,
    RelatedMeal,
    RunningBalanceRow,
)
from .periods import current_bill_cycle, previous_month_period
from .repository import LedgerRepository


class LedgerService:
    """Use case: derive ledger entries from attendance and admin commands.

    Balances are always folded from the entries on read; nothing here keeps
    a running total that could drift from the entries that justify it.
    """

    def __init__(
        self,
        ledger: LedgerRepository,
        users: UserRepository,
        attendance: AttendanceRepository,
        audit: AuditLog,
        *,
        calculator: Optional[ProrationCalculator] = None,
        unit_of_work: Optional[Callable[[], ContextManager]] = None,
    ):
        self._ledger = ledger
        self._users = users
        self._attendance = attendance
        self._audit = audit
        self._calculator = calculator or EqualShareCalculator()
        self._unit_of_work = unit_of_work or nullcontext

    # Meal charges (driven by the attendance gate)

    def charge_meal(self, user: AnyUser, meal_date: date, meal: MealType, *, now: Optional[datetime] = None) -> Optional[LedgerEntry]:
        """Append the meal charge for a new mark; ``None`` when the user is not billable.

        At most one meal entry exists per (user, date, meal): an existing one is returned as is.
        """
        if not is_billable(user):
            return None

        with self._unit_of_work():
            existing = self._ledger.find_meal_entry(user_id=user.user_id, meal_date=meal_date, meal=meal)
            if existing:
                return existing

            entry = LedgerEntry(
                entry_id=new_id("bill"),
                user_id=user.user_id,
                tenant_id=user.tenant_id,
                type=BillItemType.MEAL,
                description=f"{meal.value} on {format_date(meal_date)}",
                amount=MEAL_COST[meal],
                timestamp=now or now_local(),
                related_meal=RelatedMeal(date=meal_date, meal=meal),
            )
            self._ledger.append([entry])
        return entry

    def retract_meal_charge(self, user_id: str, meal_date: date, meal: MealType) -> Optional[LedgerEntry]:
        with self._unit_of_work():
            existing = self._ledger.find_meal_entry(user_id=user_id, meal_date=meal_date, meal=meal)
            if existing:
                self._ledger.retract_meal_entry(existing.entry_id)
        return existing

    # Administrative commands

    def add_misc_charge(
        self,
        description: str,
        total_amount: Any,
        charge_date: date,
        scope: Union[MealScope, str],
        actor_id: str,
        tenant_id: str,
        *,
        now: Optional[datetime] = None,
    ) -> MiscChargeResult:
        description = require_non_empty(description, "Description")
        total = require_positive_amount(total_amount, "Total amount")
        scope = MealScope(scope)
        day = format_date(charge_date)

        with self._unit_of_work():
            billable_ids = self._billable_attendees(tenant_id, charge_date, scope)
            if not billable_ids:
                raise NoEligibleAttendeesError("No billable users attended this meal/day to apply charges to.")

            shares = self._calculator.split(total, billable_ids)
            if scope is MealScope.BOTH:
                text = f"{description} (Both meals on {day})"
            else:
                text = f"{description} ({scope.value} on {day})"

            timestamp = now or now_local()
            entries = tuple(
                LedgerEntry(
                    entry_id=new_id("bill-misc"),
                    user_id=user_id,
                    tenant_id=tenant_id,
                    type=BillItemType.MISC,
                    description=text,
                    amount=shares[user_id],
                    timestamp=timestamp,
                )
                for user_id in billable_ids
            )
            self._ledger.append(entries)
            self._audit.record(
                HistoryType.FINANCIAL_ADMIN,
                f"Added misc charge of {CURRENCY_LABEL} {total} for {scope.value} on {day}, "
                f"affecting {len(entries)} billable users.",
                actor_id=actor_id,
                tenant_id=tenant_id,
                now=timestamp,
            )

        return MiscChargeResult(entries=entries, share=entries[0].amount)

    def add_payment(
        self,
        user_id: str,
        amount: Any,
        actor_id: str,
        *,
        tenant_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> LedgerEntry:
        amount = require_positive_amount(amount, "Payment amount")

        with self._unit_of_work():
            user = self._users.get_by_id(user_id)
            if not user or (tenant_id is not None and user.tenant_id != tenant_id):
                raise NotFoundError("User not found")

            timestamp = now or now_local()
            entry = LedgerEntry(
                entry_id=new_id("bill-payment"),
                user_id=user.user_id,
                tenant_id=user.tenant_id,
                type=BillItemType.PAYMENT,
                description="Payment Received",
                amount=-amount,
                timestamp=timestamp,
            )
            self._ledger.append([entry])
            self._audit.record(
                HistoryType.FINANCIAL_ADMIN,
                f"Recorded payment of {CURRENCY_LABEL} {amount} for user {user.name}.",
                actor_id=actor_id,
                tenant_id=user.tenant_id,
                now=timestamp,
            )
        return entry

    # Read paths (pure derivations)

    def list_for_user(self, user_id: str, tenant_id: Optional[str] = None) -> Sequence[LedgerEntry]:
        return self._ledger.list_for_user(user_id, tenant_id=tenant_id)

    def balance_for(self, user_id: str, tenant_id: Optional[str] = None) -> Decimal:
        return money_sum(e.amount for e in self._ledger.list_for_user(user_id, tenant_id=tenant_id))

    def running_history(self, user_id: str, tenant_id: Optional[str] = None) -> list[RunningBalanceRow]:
        """Oldest first, each entry paired with the balance right after it."""
        entries = sorted(self._ledger.list_for_user(user_id, tenant_id=tenant_id), key=lambda e: e.timestamp)
        rows: list[RunningBalanceRow] = []
        balance = ZERO
        for entry in entries:
            balance += entry.amount
            rows.append(RunningBalanceRow(entry=entry, balance_after=balance))
        return rows

    def period_summary(self, user_id: str, start: datetime, end: datetime, tenant_id: Optional[str] = None) -> PeriodSummary:
        in_period = [e for e in self._ledger.list_for_user(user_id, tenant_id=tenant_id) if start <= e.timestamp <= end]
        return PeriodSummary(
            start=start,
            end=end,
            meal_charges=money_sum(e.amount for e in in_period if e.type == BillItemType.MEAL),
            misc_charges=money_sum(e.amount for e in in_period if e.type == BillItemType.MISC),
        )

    def current_bill(self, user_id: str, today: date, tenant_id: Optional[str] = None) -> PeriodSummary:
        period: BillPeriod = current_bill_cycle(today)
        return self.period_summary(user_id, period.start, period.end, tenant_id)

    def previous_month_bill(self, user_id: str, today: date, tenant_id: Optional[str] = None) -> PeriodSummary:
        period = previous_month_period(today)
        return self.period_summary(user_id, period.start, period.end, tenant_id)

    def account_summary(self, user_id: str) -> AccountSummary:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("User not found")

        entries = self._ledger.list_for_user(user_id, tenant_id=user.tenant_id)
        payments = money_sum(e.amount for e in entries if e.type == BillItemType.PAYMENT)
        charges = money_sum(e.amount for e in entries if e.type != BillItemType.PAYMENT)
        return AccountSummary(
            arrears=user.arrears if isinstance(user, Student) else ZERO,
            security_fee=user.security_fee if isinstance(user, Student) else ZERO,
            total_charges=charges,
            total_paid=-payments,
            remaining_balance=charges + payments,
        )

    def _billable_attendees(self, tenant_id: str, charge_date: date, scope: MealScope) -> list[str]:
        seen: list[str] = []
        for meal in scope.meals():
            for mark in self._attendance.list_for_date(tenant_id, charge_date, meal=meal):
                if mark.user_id not in seen:
                    seen.append(mark.user_id)

        billable: list[str] = []
        for user_id in seen:
            user = self._users.get_by_id(user_id)
            if user and user.tenant_id == tenant_id and is_billable(user):
                billable.append(user_id)
        return billable
