from __future__ import annotations

from contextlib import nullcontext
from datetime import datetime
from typing import Any, Callable, ContextManager, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..audit.service import AuditLog
from ..common.datetime_utils import now_local
from ..common.ids import new_id
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH, SYSTEM_ACTOR, SYSTEM_TENANT
from ..core.enums import HistoryType, RequestStatus
from ..core.exceptions import DuplicateUsernameError, NotFoundError, TerminalStateError, ValidationError
from ..tenants.model import Tenant
from ..tenants.repository import TenantRepository
from ..tenants.service import default_settings
from ..users.model import Admin
from ..users.repository import UserRepository
from .model import ApprovalResult, RegistrationRequest
from .repository import RegistrationRepository


class RegistrationService:
    """Onboarding workflow; approving a request is the only way a tenant is created."""

    def __init__(
        self,
        requests: RegistrationRepository,
        users: UserRepository,
        tenants: TenantRepository,
        audit: AuditLog,
        *,
        unit_of_work: Optional[Callable[[], ContextManager]] = None,
    ):
        self._requests = requests
        self._users = users
        self._tenants = tenants
        self._audit = audit
        self._unit_of_work = unit_of_work or nullcontext

    @staticmethod
    def _parse_age(value: Any) -> int:
        try:
            age = int(value)
        except (TypeError, ValueError):
            raise ValidationError("Please enter a valid age.")
        if age <= 0:
            raise ValidationError("Please enter a valid age.")
        return age

    def submit(
        self,
        *,
        name: str,
        age: Any,
        profession: str,
        contact_number: str,
        username: str,
        password: str,
        now: Optional[datetime] = None,
    ) -> RegistrationRequest:
        name = require_non_empty(name, "Name")
        age = self._parse_age(age)
        profession = require_non_empty(profession, "Profession")
        contact_number = require_non_empty(contact_number, "Contact number")
        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        request = RegistrationRequest(
            request_id=new_id("reg"),
            name=name,
            age=age,
            profession=profession,
            contact_number=contact_number,
            username=username,
            password_hash=generate_password_hash(password),
            status=RequestStatus.PENDING,
            created_at=now or now_local(),
        )

        with self._unit_of_work():
            if self._users.get_by_username(username):
                raise DuplicateUsernameError("Username already exists")
            self._requests.create(request)
            self._audit.record(
                HistoryType.TENANT_MANAGEMENT,
                f"New registration request from {name} ({username}).",
                actor_id=SYSTEM_ACTOR,
                tenant_id=SYSTEM_TENANT,
                now=request.created_at,
            )
        return request

    def get(self, request_id: str) -> Optional[RegistrationRequest]:
        return self._requests.get(request_id)

    def list_pending(self) -> Sequence[RegistrationRequest]:
        return self._requests.list(status=RequestStatus.PENDING)

    def list_all(self) -> Sequence[RegistrationRequest]:
        return self._requests.list()

    def _require_pending(self, request_id: str) -> RegistrationRequest:
        req = self._requests.get(request_id)
        if not req:
            raise NotFoundError("Registration request not found")
        if req.status != RequestStatus.PENDING:
            raise TerminalStateError(f"Registration request is already {req.status.value}")
        return req

    def approve(self, request_id: str, approver_id: str, *, now: Optional[datetime] = None) -> ApprovalResult:
        now = now or now_local()

        with self._unit_of_work():
            req = self._require_pending(request_id)
            if self._users.get_by_username(req.username):
                raise DuplicateUsernameError("Username already exists")

            tenant_id = new_id("tenant")
            admin = Admin(
                user_id=new_id("user"),
                name=req.username,
                tenant_id=tenant_id,
                password_hash=req.password_hash,
                include_in_billing=False,
                is_super_admin=False,
            )
            tenant = Tenant(
                tenant_id=tenant_id,
                name=f"{req.name}'s Mess",
                owner_id=admin.user_id,
                settings=default_settings(),
            )

            self._tenants.create(tenant)
            self._users.create(admin)
            if not self._requests.decide(request_id, status=RequestStatus.APPROVED, decided_by=approver_id, decided_at=now):
                raise TerminalStateError("Registration request is no longer pending")
            self._audit.record(
                HistoryType.TENANT_MANAGEMENT,
                f"Approved request for {req.name}. Created new tenant: {tenant.name}.",
                actor_id=approver_id,
                tenant_id=SYSTEM_TENANT,
                now=now,
            )
            decided = self._requests.get(request_id)

        return ApprovalResult(request=decided or req, tenant=tenant, admin=admin)

    def reject(self, request_id: str, approver_id: str, *, now: Optional[datetime] = None) -> RegistrationRequest:
        now = now or now_local()

        with self._unit_of_work():
            req = self._require_pending(request_id)
            if not self._requests.decide(request_id, status=RequestStatus.REJECTED, decided_by=approver_id, decided_at=now):
                raise TerminalStateError("Registration request is no longer pending")
            self._audit.record(
                HistoryType.TENANT_MANAGEMENT,
                f"Rejected registration request for {req.name}.",
                actor_id=approver_id,
                tenant_id=SYSTEM_TENANT,
                now=now,
            )
            decided = self._requests.get(request_id)

        return decided or req
