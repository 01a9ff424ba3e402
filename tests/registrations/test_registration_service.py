from __future__ import annotations

import pytest

from src.mess_system.mess_system.core.constants import SYSTEM_TENANT
from src.mess_system.mess_system.core.enums import HistoryType, MealType, RequestStatus, Role
from src.mess_system.mess_system.core.exceptions import (
    DuplicateUsernameError,
    NotFoundError,
    TerminalStateError,
    ValidationError,
)
from src.mess_system.mess_system.storage.bootstrap import DEFAULT_ADMIN_ID

ALICE = dict(
    name="Alice",
    age=30,
    profession="Warden",
    contact_number="0300-1234567",
    username="alice",
    password="alicepw",
)


def _submit(container, fixed_now, **overrides):
    return container.registration_service.submit(**{**ALICE, **overrides}, now=fixed_now)


def test_submit_creates_pending_request_and_logs_as_system(container, fixed_now):
    req = _submit(container, fixed_now)

    assert req.status == RequestStatus.PENDING
    assert req.password_hash != "alicepw"
    assert [r.request_id for r in container.registration_service.list_pending()] == [req.request_id]

    latest = container.audit_log.list_for_tenant(SYSTEM_TENANT, limit=1)[0]
    assert latest.type == HistoryType.TENANT_MANAGEMENT
    assert latest.actor_id == "system"
    assert latest.description == "New registration request from Alice (alice)."


@pytest.mark.parametrize(
    "overrides",
    [{"name": " "}, {"age": 0}, {"age": "abc"}, {"username": ""}, {"password": "x"}, {"profession": ""}],
)
def test_submit_rejects_malformed_input(container, fixed_now, overrides):
    with pytest.raises(ValidationError):
        _submit(container, fixed_now, **overrides)
    assert container.registration_service.list_pending() == []


def test_submit_rejects_taken_username(container, fixed_now):
    with pytest.raises(DuplicateUsernameError):
        _submit(container, fixed_now, username="admin")


def test_approve_provisions_exactly_one_tenant_and_admin(container, fixed_now):
    req = _submit(container, fixed_now)
    tenants_before = len(container.tenants_repo.list_all())

    result = container.registration_service.approve(req.request_id, DEFAULT_ADMIN_ID, now=fixed_now)

    assert len(container.tenants_repo.list_all()) == tenants_before + 1
    assert result.tenant.name == "Alice's Mess"
    assert result.tenant.owner_id == result.admin.user_id
    assert result.admin.tenant_id == result.tenant.tenant_id
    assert result.admin.is_super_admin is False
    assert result.admin.role == Role.ADMIN

    stored = container.registration_service.get(req.request_id)
    assert stored.status == RequestStatus.APPROVED
    assert stored.decided_by == DEFAULT_ADMIN_ID
    assert stored.decided_at == fixed_now

    # The applicant logs in with the password chosen at submit time.
    s_user = container.auth_service.authenticate("alice", "alicepw")
    assert s_user.tenant_id == result.tenant.tenant_id

    latest = container.audit_log.list_for_tenant(SYSTEM_TENANT, limit=1)[0]
    assert latest.description == "Approved request for Alice. Created new tenant: Alice's Mess."


def test_new_tenant_gets_its_own_copy_of_default_settings(container, fixed_now):
    req = _submit(container, fixed_now)
    result = container.registration_service.approve(req.request_id, DEFAULT_ADMIN_ID, now=fixed_now)

    container.tenant_service.update_settings(
        result.tenant.tenant_id,
        {"mealTimes": {"Breakfast": {"start": 5, "end": 6}, "Dinner": {"start": 18, "end": 20}}},
        result.admin.user_id,
    )

    assert container.tenant_service.get_settings("tenant1").window_for(MealType.BREAKFAST).start == 7
    assert container.tenant_service.get_settings(result.tenant.tenant_id).window_for(MealType.BREAKFAST).start == 5


def test_second_approve_is_rejected(container, fixed_now):
    req = _submit(container, fixed_now)
    container.registration_service.approve(req.request_id, DEFAULT_ADMIN_ID, now=fixed_now)
    tenants_after_first = len(container.tenants_repo.list_all())

    with pytest.raises(TerminalStateError):
        container.registration_service.approve(req.request_id, DEFAULT_ADMIN_ID, now=fixed_now)
    with pytest.raises(TerminalStateError):
        container.registration_service.reject(req.request_id, DEFAULT_ADMIN_ID, now=fixed_now)

    assert len(container.tenants_repo.list_all()) == tenants_after_first


def test_reject_marks_request_and_creates_nothing(container, fixed_now):
    req = _submit(container, fixed_now)
    tenants_before = len(container.tenants_repo.list_all())

    rejected = container.registration_service.reject(req.request_id, DEFAULT_ADMIN_ID, now=fixed_now)

    assert rejected.status == RequestStatus.REJECTED
    assert len(container.tenants_repo.list_all()) == tenants_before
    assert container.user_service.find_by_username("alice") is None
    assert container.registration_service.list_pending() == []


def test_unknown_request_is_not_found(container):
    with pytest.raises(NotFoundError):
        container.registration_service.approve("reg-missing", DEFAULT_ADMIN_ID)
    with pytest.raises(NotFoundError):
        container.registration_service.reject("reg-missing", DEFAULT_ADMIN_ID)


def test_approve_fails_when_username_was_taken_meanwhile(container, fixed_now):
    req = _submit(container, fixed_now)
    container.user_service.add(
        role=Role.STUDENT, name="alice", password="other", actor_id=DEFAULT_ADMIN_ID, tenant_id="tenant1"
    )

    with pytest.raises(DuplicateUsernameError):
        container.registration_service.approve(req.request_id, DEFAULT_ADMIN_ID, now=fixed_now)

    assert container.registration_service.get(req.request_id).status == RequestStatus.PENDING
    assert len(container.tenants_repo.list_all()) == 1
