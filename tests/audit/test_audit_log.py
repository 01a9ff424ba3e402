from __future__ import annotations

import logging

import pytest

from src.mess_system.mess_system.core.enums import HistoryType
from src.mess_system.mess_system.storage.bootstrap import DEFAULT_ADMIN_ID, DEFAULT_TENANT_ID

LOGGER = "src.mess_system.mess_system.audit.service"


def test_committed_entry_is_logged(container, caplog):
    caplog.set_level(logging.INFO, logger=LOGGER)

    container.audit_log.record(
        HistoryType.SYSTEM, "Nightly backup done.", actor_id=DEFAULT_ADMIN_ID, tenant_id=DEFAULT_TENANT_ID
    )

    assert any("Nightly backup done." in r.getMessage() for r in caplog.records)


def test_rolled_back_entry_is_neither_stored_nor_logged(container, caplog):
    caplog.set_level(logging.INFO, logger=LOGGER)
    history_before = len(container.audit_log.list_all())

    with pytest.raises(RuntimeError):
        with container.store.transaction():
            container.audit_log.record(
                HistoryType.SYSTEM, "Half-done command.", actor_id=DEFAULT_ADMIN_ID, tenant_id=DEFAULT_TENANT_ID
            )
            assert not any("Half-done command." in r.getMessage() for r in caplog.records)
            raise RuntimeError("boom")

    assert len(container.audit_log.list_all()) == history_before
    assert not any("Half-done command." in r.getMessage() for r in caplog.records)
