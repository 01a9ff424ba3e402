from __future__ import annotations

from datetime import datetime

import pytest

from src.mess_system.mess_system.container import build_container


@pytest.fixture
def fixed_now() -> datetime:
    # Thursday morning, inside the default breakfast window (7-10).
    return datetime(2025, 3, 20, 8, 30, 0)


@pytest.fixture
def container():
    """Fully wired services over a fresh in-memory document."""
    return build_container(store_path=None, admin_username="admin", admin_password="admin")
