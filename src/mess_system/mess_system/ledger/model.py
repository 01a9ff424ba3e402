from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import BillItemType, MealType


@dataclass(frozen=True)
class RelatedMeal:
    date: date
    meal: MealType


@dataclass(frozen=True)
class LedgerEntry:
    """Domain entity: one signed monetary record (positive = charge, negative = credit)."""

    entry_id: str
    user_id: str
    tenant_id: str
    type: BillItemType
    description: str
    amount: Decimal
    timestamp: datetime
    related_meal: Optional[RelatedMeal] = None


@dataclass(frozen=True)
class RunningBalanceRow:
    entry: LedgerEntry
    balance_after: Decimal


@dataclass(frozen=True)
class PeriodSummary:
    start: datetime
    end: datetime
    meal_charges: Decimal
    misc_charges: Decimal

    @property
    def total(self) -> Decimal:
        return self.meal_charges + self.misc_charges


@dataclass(frozen=True)
class BillPeriod:
    start: datetime
    end: datetime


@dataclass(frozen=True)
class AccountSummary:
    arrears: Decimal
    security_fee: Decimal
    total_charges: Decimal
    total_paid: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True)
class MiscChargeResult:
    entries: tuple[LedgerEntry, ...]
    share: Decimal

    @property
    def user_ids(self) -> tuple[str, ...]:
        return tuple(e.user_id for e in self.entries)
