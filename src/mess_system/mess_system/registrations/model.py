from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import RequestStatus
from ..tenants.model import Tenant
from ..users.model import Admin


@dataclass(frozen=True)
class RegistrationRequest:
    """An application to run a new mess. Approval provisions a tenant."""

    request_id: str
    name: str
    age: int
    profession: str
    contact_number: str
    username: str
    password_hash: str
    status: RequestStatus
    created_at: datetime
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None


@dataclass(frozen=True)
class ApprovalResult:
    request: RegistrationRequest
    tenant: Tenant
    admin: Admin
