from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Union

from ..common.money import ZERO
from ..core.enums import Role


@dataclass(frozen=True)
class Student:
    """Domain entity: a student account. Students are always billable."""

    user_id: str
    name: str
    tenant_id: str
    password_hash: str
    arrears: Decimal = ZERO
    security_fee: Decimal = ZERO
    role: Role = field(default=Role.STUDENT, init=False)


@dataclass(frozen=True)
class Cook:
    user_id: str
    name: str
    tenant_id: str
    password_hash: str
    include_in_billing: bool = False
    role: Role = field(default=Role.COOK, init=False)


@dataclass(frozen=True)
class Admin:
    user_id: str
    name: str
    tenant_id: str
    password_hash: str
    include_in_billing: bool = False
    is_super_admin: bool = False
    role: Role = field(default=Role.ADMIN, init=False)


AnyUser = Union[Student, Cook, Admin]

# Fields an edit may touch, per role. ``password`` is hashed before storing.
EDITABLE_FIELDS = {
    Role.STUDENT: frozenset({"name", "password", "arrears", "security_fee"}),
    Role.COOK: frozenset({"name", "password", "include_in_billing"}),
    Role.ADMIN: frozenset({"name", "password", "include_in_billing", "is_super_admin"}),
}


def is_billable(user: AnyUser) -> bool:
    """Whether meal attendance and misc charges create ledger entries for ``user``."""
    if isinstance(user, Student):
        return True
    if isinstance(user, (Cook, Admin)):
        return bool(user.include_in_billing)
    raise TypeError(f"Unsupported user type: {type(user)!r}")
