from __future__ import annotations

from decimal import Decimal

from src.mess_system.mess_system.ledger.calculator.equal_share_calculator import EqualShareCalculator


def test_equal_share_keeps_decimal_precision():
    shares = EqualShareCalculator().split(Decimal("100"), ["a", "b", "c"])

    assert set(shares) == {"a", "b", "c"}
    assert shares["a"] == shares["b"] == shares["c"]
    assert abs(sum(shares.values()) - Decimal("100")) < Decimal("1e-20")


def test_equal_share_with_nobody_is_empty():
    assert EqualShareCalculator().split(Decimal("100"), []) == {}
