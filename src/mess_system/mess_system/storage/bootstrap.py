from __future__ import annotations

import copy
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import format_timestamp, now_local
from ..core.constants import DEFAULT_MEAL_TIMES, SYSTEM_ACTOR, SYSTEM_TENANT
from ..core.enums import HistoryType, Role
from .document import DOCUMENT_KEYS, Document, JsonDocumentStore

DEFAULT_ADMIN_ID = "admin1"
DEFAULT_TENANT_ID = "tenant1"


def default_settings_row() -> dict:
    """A fresh copy of the system default schedule (never a shared reference)."""
    return {"mealTimes": {meal.value: dict(window) for meal, window in copy.deepcopy(DEFAULT_MEAL_TIMES).items()}}


def initial_document(
    *,
    admin_username: str = "admin",
    admin_password: str = "admin",
    tenant_name: str = "Main Mess",
    now: Optional[datetime] = None,
) -> Document:
    now = now or now_local()
    doc: Document = {key: [] for key in DOCUMENT_KEYS}
    doc["users"].append(
        {
            "id": DEFAULT_ADMIN_ID,
            "name": admin_username,
            "role": Role.ADMIN.value,
            "tenantId": DEFAULT_TENANT_ID,
            "passwordHash": generate_password_hash(admin_password),
            "includeInBilling": False,
            "isSuperAdmin": True,
        }
    )
    doc["tenants"].append(
        {
            "id": DEFAULT_TENANT_ID,
            "name": tenant_name,
            "ownerId": DEFAULT_ADMIN_ID,
            "settings": default_settings_row(),
        }
    )
    doc["history"].append(
        {
            "id": "h1",
            "type": HistoryType.SYSTEM.value,
            "description": "System initialized.",
            "timestamp": format_timestamp(now),
            "actorId": SYSTEM_ACTOR,
            "tenantId": SYSTEM_TENANT,
        }
    )
    return doc


def open_store(
    path: Optional[Union[str, Path]],
    *,
    admin_username: str = "admin",
    admin_password: str = "admin",
    tenant_name: str = "Main Mess",
) -> JsonDocumentStore:
    """Open (or create and seed) the deployment document."""

    def _defaults() -> Document:
        return initial_document(admin_username=admin_username, admin_password=admin_password, tenant_name=tenant_name)

    return JsonDocumentStore.get_instance(path, defaults=_defaults)
