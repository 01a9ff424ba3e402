from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

Row = Dict[str, Any]


def find_one(rows: Iterable[Row], predicate: Callable[[Row], bool]) -> Optional[Row]:
    for row in rows:
        if predicate(row):
            return row
    return None


def replace_where(rows: List[Row], predicate: Callable[[Row], bool], new_row: Row) -> bool:
    for i, row in enumerate(rows):
        if predicate(row):
            rows[i] = new_row
            return True
    return False


def remove_where(rows: List[Row], predicate: Callable[[Row], bool]) -> int:
    kept = [row for row in rows if not predicate(row)]
    removed = len(rows) - len(kept)
    rows[:] = kept
    return removed
