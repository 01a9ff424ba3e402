from __future__ import annotations

import dataclasses
from contextlib import nullcontext
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, ContextManager, Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..audit.service import AuditLog
from ..common.ids import new_id
from ..common.money import ZERO, to_money
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import HistoryType, Role
from ..core.exceptions import AuthenticationError, DuplicateUsernameError, NotFoundError, ValidationError
from .model import EDITABLE_FIELDS, Admin, AnyUser, Cook, Student
from .repository import UserRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: str
    name: str
    role: Role
    tenant_id: str
    is_super_admin: bool = False


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user:
            raise AuthenticationError("Invalid username or password.")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. empty or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password.")

        return SessionUser(
            user_id=user.user_id,
            name=user.name,
            role=user.role,
            tenant_id=user.tenant_id,
            is_super_admin=isinstance(user, Admin) and user.is_super_admin,
        )


class UserService:
    """Use case: the user directory (accounts and billing eligibility).

    Usernames are unique across all tenants because login is by username
    alone; ``add`` refuses a taken name instead of relying on first-match
    lookup.
    """

    def __init__(
        self,
        users: UserRepository,
        audit: AuditLog,
        *,
        unit_of_work: Optional[Callable[[], ContextManager]] = None,
    ):
        self._users = users
        self._audit = audit
        self._unit_of_work = unit_of_work or nullcontext

    def find_by_username(self, username: str) -> Optional[AnyUser]:
        return self._users.get_by_username(username)

    def get_by_id(self, user_id: str) -> Optional[AnyUser]:
        return self._users.get_by_id(user_id)

    def list_for_tenant(self, tenant_id: str, *, role: Optional[Role] = None) -> Sequence[AnyUser]:
        return self._users.list_for_tenant(tenant_id, role=role)

    def add(
        self,
        *,
        role: Role,
        name: str,
        password: str,
        actor_id: str,
        tenant_id: str,
        arrears: Any = ZERO,
        security_fee: Any = ZERO,
        include_in_billing: Optional[bool] = None,
        is_super_admin: bool = False,
    ) -> AnyUser:
        name = require_non_empty(name, "Username")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        role = Role(role)

        user_id = new_id("user")
        password_hash = generate_password_hash(password)
        if role == Role.STUDENT:
            user: AnyUser = Student(
                user_id=user_id,
                name=name,
                tenant_id=tenant_id,
                password_hash=password_hash,
                arrears=to_money(arrears, "Arrears"),
                security_fee=to_money(security_fee, "Security fee"),
            )
        elif role == Role.COOK:
            user = Cook(
                user_id=user_id,
                name=name,
                tenant_id=tenant_id,
                password_hash=password_hash,
                include_in_billing=bool(include_in_billing),
            )
        else:
            user = Admin(
                user_id=user_id,
                name=name,
                tenant_id=tenant_id,
                password_hash=password_hash,
                include_in_billing=bool(include_in_billing),
                is_super_admin=bool(is_super_admin),
            )

        with self._unit_of_work():
            if self._users.get_by_username(name):
                raise DuplicateUsernameError("Username already exists")
            self._users.create(user)
            self._audit.record(
                HistoryType.USER_MANAGEMENT,
                f"Added new {role.value}: {name}.",
                actor_id=actor_id,
                tenant_id=tenant_id,
            )
        return user

    def update(self, user_id: str, changes: Mapping[str, Any], actor_id: str) -> AnyUser:
        if not changes:
            raise ValidationError("Nothing to update")

        with self._unit_of_work():
            old = self._users.get_by_id(user_id)
            if not old:
                raise NotFoundError("User not found")

            allowed = EDITABLE_FIELDS[old.role]
            unknown = sorted(set(changes) - allowed)
            if unknown:
                raise ValidationError(f"Cannot change {', '.join(unknown)} for a {old.role.value}")

            values = self._normalize_changes(changes)
            if "name" in values and values["name"] != old.name:
                taken = self._users.get_by_username(values["name"])
                if taken and taken.user_id != old.user_id:
                    raise DuplicateUsernameError("Username already exists")
            if "password" in values:
                values["password_hash"] = generate_password_hash(values.pop("password"))

            new = dataclasses.replace(old, **values)
            self._users.update(new)

            updated_fields = ", ".join(k for k in changes if k != "password") or "password"
            self._audit.record(
                HistoryType.USER_MANAGEMENT,
                f"Updated {old.role.value} {old.name}'s details ({updated_fields}).",
                actor_id=actor_id,
                tenant_id=old.tenant_id,
            )
            # Billing-relevant fields are audited a second time as financial events.
            if isinstance(old, Student) and isinstance(new, Student):
                if new.arrears != old.arrears:
                    self._audit.record(
                        HistoryType.FINANCIAL_ADMIN,
                        f"Updated {old.name}'s arrears from {old.arrears} to {new.arrears}.",
                        actor_id=actor_id,
                        tenant_id=old.tenant_id,
                    )
                if new.security_fee != old.security_fee:
                    self._audit.record(
                        HistoryType.FINANCIAL_ADMIN,
                        f"Updated {old.name}'s security fee from {old.security_fee} to {new.security_fee}.",
                        actor_id=actor_id,
                        tenant_id=old.tenant_id,
                    )
        return new

    def delete(self, user_id: str, actor_id: str) -> None:
        with self._unit_of_work():
            user = self._users.get_by_id(user_id)
            if not user:
                raise NotFoundError("User not found")
            if isinstance(user, Admin) and user.is_super_admin:
                raise ValidationError("Cannot delete a super admin")
            self._users.delete_by_id(user_id)
            self._audit.record(
                HistoryType.USER_MANAGEMENT,
                f"Deleted {user.role.value}: {user.name}.",
                actor_id=actor_id,
                tenant_id=user.tenant_id,
            )

    @staticmethod
    def _normalize_changes(changes: Mapping[str, Any]) -> dict:
        values: dict = {}
        for key, value in changes.items():
            if key == "name":
                values[key] = require_non_empty(value, "Username")
            elif key == "password":
                values[key] = require_min_length(value, "Password", MIN_PASSWORD_LENGTH)
            elif key in ("arrears", "security_fee"):
                amount: Decimal = to_money(value, key.replace("_", " ").capitalize())
                if amount < 0:
                    raise ValidationError(f"{key.replace('_', ' ').capitalize()} cannot be negative")
                values[key] = amount
            elif key in ("include_in_billing", "is_super_admin"):
                if not isinstance(value, bool):
                    raise ValidationError(f"{key} must be true or false")
                values[key] = value
        return values
