from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import CashTransactionType


@dataclass(frozen=True)
class CashTransaction:
    """Cash handed to or returned by the catering staff. ``amount`` is unsigned."""

    tx_id: str
    tenant_id: str
    type: CashTransactionType
    amount: Decimal
    timestamp: datetime
    admin_id: str
    reason: Optional[str] = None


@dataclass(frozen=True)
class CashTotals:
    given: Decimal
    returned: Decimal
    adjustment: Decimal
