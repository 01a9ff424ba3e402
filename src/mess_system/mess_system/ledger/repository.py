from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import MealType
from .model import LedgerEntry


class LedgerRepository(Protocol):
    """Append-only store of ledger entries.

    The only removal is ``retract_meal_entry``: a meal charge lives and dies
    with the attendance mark that created it.
    """

    def append(self, entries: Sequence[LedgerEntry]) -> None:
        raise NotImplementedError

    def list_for_user(self, user_id: str, *, tenant_id: Optional[str] = None) -> Sequence[LedgerEntry]:
        """Entries in insertion order."""

        raise NotImplementedError

    def find_meal_entry(self, *, user_id: str, meal_date: date, meal: MealType) -> Optional[LedgerEntry]:
        raise NotImplementedError

    def retract_meal_entry(self, entry_id: str) -> bool:
        raise NotImplementedError
