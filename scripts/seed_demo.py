from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.mess_system.mess_system.container import build_container
from src.mess_system.mess_system.core.enums import Role
from src.mess_system.mess_system.storage.bootstrap import DEFAULT_ADMIN_ID, DEFAULT_TENANT_ID

DEMO_USERS = [
    {"role": Role.STUDENT, "name": "student1", "password": "1234"},
    {"role": Role.STUDENT, "name": "student2", "password": "1234"},
    {"role": Role.COOK, "name": "cook1", "password": "1234", "include_in_billing": False},
]


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        store_path=settings.STORE_PATH,
        admin_username=settings.BOOTSTRAP_ADMIN_USERNAME,
        admin_password=settings.BOOTSTRAP_ADMIN_PASSWORD,
        tenant_name=settings.BOOTSTRAP_TENANT_NAME,
    )

    added = 0
    for demo in DEMO_USERS:
        if container.user_service.find_by_username(demo["name"]):
            continue
        container.user_service.add(actor_id=DEFAULT_ADMIN_ID, tenant_id=DEFAULT_TENANT_ID, **demo)
        added += 1

    print(f"OK: Seeded {added} demo users into {DEFAULT_TENANT_ID} -> {container.store.path or '<memory>'}")


if __name__ == "__main__":
    main()
