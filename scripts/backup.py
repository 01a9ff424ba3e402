"""Backup the JSON store.

Note: the store is rewritten atomically, so copying the file at any moment
yields a complete document.
"""

from __future__ import annotations

import importlib
import shutil
import sys
from datetime import datetime
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    store_path = getattr(settings, "STORE_PATH", None)
    if not store_path or not Path(store_path).exists():
        raise SystemExit(f"Store file not found: {store_path!r}. Run scripts/init_store.py first.")

    out_dir = REPO_ROOT / "backups"
    out_dir.mkdir(parents=True, exist_ok=True)

    ts = datetime.now().strftime("%Y%m%d_%H%M%S")
    out_file = out_dir / f"mess_store_{ts}.json"
    shutil.copy2(store_path, out_file)
    print(f"OK: Backup created: {out_file}")


if __name__ == "__main__":
    main()
