from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .attendance.json_attendance_repository import JsonAttendanceRepository
from .attendance.service import AttendanceService
from .audit.json_history_repository import JsonHistoryRepository
from .audit.service import AuditLog
from .cash.json_cash_repository import JsonCashTransactionRepository
from .cash.service import CashDrawerService
from .ledger.calculator.equal_share_calculator import EqualShareCalculator
from .ledger.json_ledger_repository import JsonLedgerRepository
from .ledger.service import LedgerService
from .menus.json_menu_repository import JsonMenuRepository
from .menus.service import MenuService
from .notifications.json_notification_repository import JsonNotificationRepository
from .notifications.service import NotificationService
from .registrations.json_registration_repository import JsonRegistrationRepository
from .registrations.service import RegistrationService
from .storage.bootstrap import open_store
from .storage.document import JsonDocumentStore
from .tenants.json_tenant_repository import JsonTenantRepository
from .tenants.service import TenantService
from .users.json_user_repository import JsonUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    store: JsonDocumentStore

    users_repo: JsonUserRepository
    tenants_repo: JsonTenantRepository
    attendance_repo: JsonAttendanceRepository
    ledger_repo: JsonLedgerRepository
    cash_repo: JsonCashTransactionRepository
    history_repo: JsonHistoryRepository
    registrations_repo: JsonRegistrationRepository
    menus_repo: JsonMenuRepository
    notifications_repo: JsonNotificationRepository

    audit_log: AuditLog
    auth_service: AuthService
    user_service: UserService
    tenant_service: TenantService
    ledger_service: LedgerService
    attendance_service: AttendanceService
    cash_service: CashDrawerService
    registration_service: RegistrationService
    notification_service: NotificationService
    menu_service: MenuService


def build_container(
    *,
    store_path: Optional[Union[str, Path]],
    admin_username: str = "admin",
    admin_password: str = "admin",
    tenant_name: str = "Main Mess",
) -> Container:
    store = open_store(
        store_path,
        admin_username=admin_username,
        admin_password=admin_password,
        tenant_name=tenant_name,
    )
    # Every command runs inside one store transaction so it commits (and is written) as a whole.
    uow = store.transaction

    users_repo = JsonUserRepository(store)
    tenants_repo = JsonTenantRepository(store)
    attendance_repo = JsonAttendanceRepository(store)
    ledger_repo = JsonLedgerRepository(store)
    cash_repo = JsonCashTransactionRepository(store)
    history_repo = JsonHistoryRepository(store)
    registrations_repo = JsonRegistrationRepository(store)
    menus_repo = JsonMenuRepository(store)
    notifications_repo = JsonNotificationRepository(store)

    audit_log = AuditLog(history_repo, after_commit=store.after_commit)
    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo, audit_log, unit_of_work=uow)
    tenant_service = TenantService(tenants_repo, audit_log, unit_of_work=uow)
    ledger_service = LedgerService(
        ledger_repo,
        users_repo,
        attendance_repo,
        audit_log,
        calculator=EqualShareCalculator(),
        unit_of_work=uow,
    )
    attendance_service = AttendanceService(
        attendance_repo,
        users_repo,
        tenants_repo,
        ledger_service,
        audit_log,
        unit_of_work=uow,
    )
    cash_service = CashDrawerService(cash_repo, audit_log, unit_of_work=uow)
    registration_service = RegistrationService(
        registrations_repo,
        users_repo,
        tenants_repo,
        audit_log,
        unit_of_work=uow,
    )
    notification_service = NotificationService(notifications_repo, audit_log, unit_of_work=uow)
    menu_service = MenuService(menus_repo, users_repo, notification_service, audit_log, unit_of_work=uow)

    return Container(
        store=store,
        users_repo=users_repo,
        tenants_repo=tenants_repo,
        attendance_repo=attendance_repo,
        ledger_repo=ledger_repo,
        cash_repo=cash_repo,
        history_repo=history_repo,
        registrations_repo=registrations_repo,
        menus_repo=menus_repo,
        notifications_repo=notifications_repo,
        audit_log=audit_log,
        auth_service=auth_service,
        user_service=user_service,
        tenant_service=tenant_service,
        ledger_service=ledger_service,
        attendance_service=attendance_service,
        cash_service=cash_service,
        registration_service=registration_service,
        notification_service=notification_service,
        menu_service=menu_service,
    )
