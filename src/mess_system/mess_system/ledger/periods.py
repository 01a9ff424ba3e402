"""Bill cycle conventions as pure functions of "today"."""

from __future__ import annotations

import calendar
from datetime import date, datetime, time

from ..core.constants import BILL_CYCLE_CUTOVER_DAY
from .model import BillPeriod


def _month_end(year: int, month: int) -> datetime:
    last_day = calendar.monthrange(year, month)[1]
    return datetime.combine(date(year, month, last_day), time.max)


def _previous_month(today: date) -> tuple[int, int]:
    if today.month == 1:
        return today.year - 1, 12
    return today.year, today.month - 1


def current_bill_cycle(today: date) -> BillPeriod:
    """15-day cutover rule.

    After the 15th the cycle is the first half of this month (1st 00:00 to
    15th 23:59:59); otherwise it is the second half of the previous month.
    """
    if today.day > BILL_CYCLE_CUTOVER_DAY:
        return BillPeriod(
            start=datetime(today.year, today.month, 1),
            end=datetime(today.year, today.month, BILL_CYCLE_CUTOVER_DAY, 23, 59, 59),
        )

    year, month = _previous_month(today)
    return BillPeriod(
        start=datetime(year, month, BILL_CYCLE_CUTOVER_DAY + 1),
        end=_month_end(year, month),
    )


def previous_month_period(today: date) -> BillPeriod:
    year, month = _previous_month(today)
    return BillPeriod(start=datetime(year, month, 1), end=_month_end(year, month))
