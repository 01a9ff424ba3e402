from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.mess_system.mess_system.storage.bootstrap import open_store


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    store_path = getattr(settings, "STORE_PATH", None)
    if not store_path:
        raise SystemExit("STORE_PATH is not set; nothing to initialize for an in-memory store.")

    store = open_store(
        store_path,
        admin_username=settings.BOOTSTRAP_ADMIN_USERNAME,
        admin_password=settings.BOOTSTRAP_ADMIN_PASSWORD,
        tenant_name=settings.BOOTSTRAP_TENANT_NAME,
    )
    # An empty transaction rewrites the file with any keys missing from older documents.
    with store.transaction():
        pass

    with store.read() as doc:
        counts = ", ".join(f"{key}={len(rows)}" for key, rows in doc.items())
    print(f"OK: Store ready -> {store.path} ({counts})")


if __name__ == "__main__":
    main()
