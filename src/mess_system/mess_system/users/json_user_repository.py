from __future__ import annotations

from typing import Optional, Sequence

from ..common.money import ZERO, to_money
from ..core.enums import Role
from ..storage.document import JsonDocumentStore
from ..storage.json_base import Row, find_one, remove_where, replace_where
from .model import Admin, AnyUser, Cook, Student
from .repository import UserRepository


def _from_row(row: Row) -> AnyUser:
    role = Role(row["role"])
    common = dict(
        user_id=row["id"],
        name=row["name"],
        tenant_id=row["tenantId"],
        password_hash=row.get("passwordHash") or "",
    )
    if role == Role.STUDENT:
        return Student(
            **common,
            arrears=to_money(row.get("arrears", ZERO)),
            security_fee=to_money(row.get("securityFee", ZERO)),
        )
    if role == Role.COOK:
        return Cook(**common, include_in_billing=bool(row.get("includeInBilling", False)))
    if role == Role.ADMIN:
        return Admin(
            **common,
            include_in_billing=bool(row.get("includeInBilling", False)),
            is_super_admin=bool(row.get("isSuperAdmin", False)),
        )
    raise ValueError(f"Unsupported role: {role!r}")


def _to_row(user: AnyUser) -> Row:
    row: Row = {
        "id": user.user_id,
        "name": user.name,
        "role": user.role.value,
        "tenantId": user.tenant_id,
        "passwordHash": user.password_hash,
    }
    if isinstance(user, Student):
        row["arrears"] = str(user.arrears)
        row["securityFee"] = str(user.security_fee)
    elif isinstance(user, Cook):
        row["includeInBilling"] = user.include_in_billing
    elif isinstance(user, Admin):
        row["includeInBilling"] = user.include_in_billing
        row["isSuperAdmin"] = user.is_super_admin
    return row


class JsonUserRepository(UserRepository):
    def __init__(self, store: JsonDocumentStore):
        self._store = store

    def get_by_id(self, user_id: str) -> Optional[AnyUser]:
        with self._store.read() as doc:
            row = find_one(doc["users"], lambda r: r["id"] == user_id)
            return _from_row(row) if row else None

    def get_by_username(self, username: str) -> Optional[AnyUser]:
        with self._store.read() as doc:
            row = find_one(doc["users"], lambda r: r["name"] == username)
            return _from_row(row) if row else None

    def list_for_tenant(self, tenant_id: str, *, role: Optional[Role] = None) -> Sequence[AnyUser]:
        with self._store.read() as doc:
            return [
                _from_row(r)
                for r in doc["users"]
                if r["tenantId"] == tenant_id and (role is None or r["role"] == role.value)
            ]

    def create(self, user: AnyUser) -> None:
        with self._store.transaction() as doc:
            doc["users"].append(_to_row(user))

    def update(self, user: AnyUser) -> bool:
        with self._store.transaction() as doc:
            return replace_where(doc["users"], lambda r: r["id"] == user.user_id, _to_row(user))

    def delete_by_id(self, user_id: str) -> bool:
        with self._store.transaction() as doc:
            return remove_where(doc["users"], lambda r: r["id"] == user_id) > 0
