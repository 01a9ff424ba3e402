from __future__ import annotations

import json

import pytest

from src.mess_system.mess_system.core.exceptions import PersistenceError
from src.mess_system.mess_system.storage import document as document_module
from src.mess_system.mess_system.storage.bootstrap import DEFAULT_TENANT_ID, initial_document, open_store
from src.mess_system.mess_system.storage.document import DOCUMENT_KEYS, JsonDocumentStore


def test_failed_transaction_leaves_no_partial_state():
    store = JsonDocumentStore(None)

    with pytest.raises(RuntimeError):
        with store.transaction() as doc:
            doc["users"].append({"id": "u1"})
            raise RuntimeError("boom")

    with store.read() as doc:
        assert doc["users"] == []


def test_nested_transactions_commit_once_with_the_outer_one():
    store = JsonDocumentStore(None)

    with store.transaction() as outer:
        outer["users"].append({"id": "u1"})
        with store.transaction() as inner:
            assert inner is outer
            inner["users"].append({"id": "u2"})
        with store.read() as seen:
            assert [u["id"] for u in seen["users"]] == ["u1", "u2"]

    with store.read() as doc:
        assert [u["id"] for u in doc["users"]] == ["u1", "u2"]


def test_inner_failure_discards_the_whole_outer_transaction():
    store = JsonDocumentStore(None)

    with pytest.raises(ValueError):
        with store.transaction() as outer:
            outer["users"].append({"id": "u1"})
            with store.transaction():
                raise ValueError("bad")

    assert store.snapshot()["users"] == []


def test_committed_document_is_written_to_disk(tmp_path):
    path = tmp_path / "store.json"
    store = JsonDocumentStore(path)

    with store.transaction() as doc:
        doc["menus"].append({"date": "2025-03-20", "tenantId": "t1", "Breakfast": "Paratha"})

    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk["menus"] == [{"date": "2025-03-20", "tenantId": "t1", "Breakfast": "Paratha"}]
    assert set(DOCUMENT_KEYS) <= set(on_disk)


def test_missing_keys_are_backfilled_on_load(tmp_path):
    path = tmp_path / "old.json"
    path.write_text(json.dumps({"users": [{"id": "u1"}]}), encoding="utf-8")

    store = JsonDocumentStore(path)
    doc = store.snapshot()

    assert doc["users"] == [{"id": "u1"}]
    for key in DOCUMENT_KEYS:
        assert key in doc


def test_unreadable_file_raises_persistence_error(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(PersistenceError):
        JsonDocumentStore(path)


def test_write_failure_keeps_the_in_memory_commit(tmp_path, monkeypatch):
    store = JsonDocumentStore(tmp_path / "store.json")

    def fail_replace(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(document_module.os, "replace", fail_replace)

    with pytest.raises(PersistenceError):
        with store.transaction() as doc:
            doc["history"].append({"id": "h1"})

    assert store.snapshot()["history"] == [{"id": "h1"}]
    assert not list(tmp_path.glob(".store-*"))


def test_initial_document_seeds_super_admin_and_default_tenant(fixed_now):
    doc = initial_document(admin_username="root", admin_password="pw", tenant_name="Hostel A", now=fixed_now)

    (admin,) = doc["users"]
    assert admin["name"] == "root"
    assert admin["isSuperAdmin"] is True
    assert admin["passwordHash"] != "pw"

    (tenant,) = doc["tenants"]
    assert tenant["id"] == DEFAULT_TENANT_ID
    assert tenant["settings"]["mealTimes"]["Breakfast"] == {"start": 7, "end": 10}

    (entry,) = doc["history"]
    assert entry["type"] == "System"
    assert entry["description"] == "System initialized."


def test_open_store_reuses_one_instance_per_path(tmp_path):
    path = tmp_path / "shared.json"
    assert open_store(path) is open_store(str(path))
    assert open_store(None) is not open_store(None)


def test_after_commit_waits_for_the_outer_transaction():
    store = JsonDocumentStore(None)
    calls = []

    with store.transaction():
        with store.transaction():
            store.after_commit(lambda: calls.append("inner"))
        assert calls == []
    assert calls == ["inner"]

    store.after_commit(lambda: calls.append("now"))
    assert calls == ["inner", "now"]


def test_after_commit_is_dropped_on_rollback():
    store = JsonDocumentStore(None)
    calls = []

    with pytest.raises(RuntimeError):
        with store.transaction():
            store.after_commit(lambda: calls.append("x"))
            raise RuntimeError("boom")

    with store.transaction():
        pass
    assert calls == []
