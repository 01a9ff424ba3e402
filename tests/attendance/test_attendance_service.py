from __future__ import annotations

import threading
from datetime import date, datetime

import pytest

from src.mess_system.mess_system.core.enums import HistoryType, MealScope, MealType, Role
from src.mess_system.mess_system.core.exceptions import AttendanceClosedError, NotFoundError
from src.mess_system.mess_system.storage.bootstrap import DEFAULT_ADMIN_ID, DEFAULT_TENANT_ID

DAY = date(2025, 3, 20)


def _student(container, name="s1"):
    return container.user_service.add(
        role=Role.STUDENT, name=name, password="pass1", actor_id=DEFAULT_ADMIN_ID, tenant_id=DEFAULT_TENANT_ID
    )


def test_mark_then_unmark_restores_ledger(container, fixed_now):
    student = _student(container)
    att = container.attendance_service
    ledger = container.ledger_service

    first = att.toggle(student.user_id, DAY, MealType.BREAKFAST, DEFAULT_ADMIN_ID, now=fixed_now)
    assert first.marked is True
    assert first.charged_entry_id is not None
    assert ledger.balance_for(student.user_id) == 50
    assert att.get_mark(student.user_id, DAY, MealType.BREAKFAST) is not None

    second = att.toggle(student.user_id, DAY, MealType.BREAKFAST, DEFAULT_ADMIN_ID, now=fixed_now)
    assert second.marked is False
    assert ledger.balance_for(student.user_id) == 0
    assert list(ledger.list_for_user(student.user_id)) == []
    assert att.get_mark(student.user_id, DAY, MealType.BREAKFAST) is None


def test_at_most_one_mark_per_user_day_meal(container, fixed_now):
    student = _student(container)
    att = container.attendance_service

    att.toggle(student.user_id, DAY, "Dinner", DEFAULT_ADMIN_ID, now=fixed_now)
    assert len(att.list_for_date(DEFAULT_TENANT_ID, DAY, MealType.DINNER)) == 1

    att.toggle(student.user_id, DAY, "Dinner", DEFAULT_ADMIN_ID, now=fixed_now)
    att.toggle(student.user_id, DAY, "Dinner", DEFAULT_ADMIN_ID, now=fixed_now)
    marks = att.list_for_date(DEFAULT_TENANT_ID, DAY, MealType.DINNER)
    assert len(marks) == 1

    meal_entries = [e for e in container.ledger_service.list_for_user(student.user_id) if e.related_meal]
    assert len(meal_entries) == 1
    assert meal_entries[0].amount == 80
    assert meal_entries[0].description == "Dinner on 2025-03-20"


def test_non_billable_cook_gets_mark_but_no_charge(container, fixed_now):
    cook = container.user_service.add(
        role=Role.COOK, name="cook", password="pass1", actor_id=DEFAULT_ADMIN_ID, tenant_id=DEFAULT_TENANT_ID
    )
    att = container.attendance_service

    result = att.toggle(cook.user_id, DAY, MealType.BREAKFAST, DEFAULT_ADMIN_ID, now=fixed_now)
    assert result.marked is True
    assert result.charged_entry_id is None
    assert container.ledger_service.list_for_user(cook.user_id) == []

    # Opt in, toggle off and on again: now the meal is charged.
    att.toggle(cook.user_id, DAY, MealType.BREAKFAST, DEFAULT_ADMIN_ID, now=fixed_now)
    container.user_service.update(cook.user_id, {"include_in_billing": True}, DEFAULT_ADMIN_ID)
    result = att.toggle(cook.user_id, DAY, MealType.BREAKFAST, DEFAULT_ADMIN_ID, now=fixed_now)

    assert result.charged_entry_id is not None
    assert container.ledger_service.balance_for(cook.user_id) == 50


@pytest.mark.parametrize(
    "hour,expected",
    [(6, False), (7, True), (9, True), (10, False)],
)
def test_breakfast_window_is_half_open(container, hour, expected):
    now = datetime(2025, 3, 20, hour, 0, 0)
    assert container.attendance_service.is_open(MealType.BREAKFAST, DEFAULT_TENANT_ID, now=now) is expected


def test_unknown_tenant_is_never_open(container, fixed_now):
    assert container.attendance_service.is_open(MealType.BREAKFAST, "nope", now=fixed_now) is False


def test_self_service_toggle_refused_outside_window(container):
    student = _student(container)
    at_end = datetime(2025, 3, 20, 10, 0, 0)

    with pytest.raises(AttendanceClosedError):
        container.attendance_service.toggle(
            student.user_id, DAY, MealType.BREAKFAST, student.user_id, enforce_window=True, now=at_end
        )

    assert container.attendance_service.get_mark(student.user_id, DAY, MealType.BREAKFAST) is None
    assert container.ledger_service.list_for_user(student.user_id) == []


def test_self_service_unmark_also_checks_window(container, fixed_now):
    student = _student(container)
    att = container.attendance_service
    att.toggle(student.user_id, DAY, MealType.BREAKFAST, student.user_id, enforce_window=True, now=fixed_now)

    with pytest.raises(AttendanceClosedError):
        att.toggle(
            student.user_id, DAY, MealType.BREAKFAST, student.user_id,
            enforce_window=True, now=datetime(2025, 3, 20, 11, 0, 0),
        )
    assert att.get_mark(student.user_id, DAY, MealType.BREAKFAST) is not None


def test_admin_toggle_ignores_window(container):
    student = _student(container)
    midnight = datetime(2025, 3, 20, 0, 15, 0)

    result = container.attendance_service.toggle(student.user_id, DAY, MealType.DINNER, DEFAULT_ADMIN_ID, now=midnight)

    assert result.marked is True


def test_toggle_unknown_user_or_other_tenant_is_not_found(container, fixed_now):
    student = _student(container)

    with pytest.raises(NotFoundError):
        container.attendance_service.toggle("missing", DAY, MealType.DINNER, DEFAULT_ADMIN_ID, now=fixed_now)
    with pytest.raises(NotFoundError):
        container.attendance_service.toggle(
            student.user_id, DAY, MealType.DINNER, DEFAULT_ADMIN_ID, tenant_id="tenant-other", now=fixed_now
        )


def test_toggle_is_audited(container, fixed_now):
    student = _student(container)
    container.attendance_service.toggle(student.user_id, DAY, MealType.BREAKFAST, DEFAULT_ADMIN_ID, now=fixed_now)
    container.attendance_service.toggle(student.user_id, DAY, MealType.BREAKFAST, DEFAULT_ADMIN_ID, now=fixed_now)

    entries = [
        e for e in container.audit_log.list_for_tenant(DEFAULT_TENANT_ID) if e.type == HistoryType.ATTENDANCE_MANAGEMENT
    ]
    assert [e.description for e in entries] == [
        "Removed Breakfast attendance for s1 on 2025-03-20.",
        "Marked Breakfast attendance for s1 on 2025-03-20.",
    ]


def test_attendees_are_deduplicated_in_first_mark_order(container, fixed_now):
    a = _student(container, "a")
    b = _student(container, "b")
    att = container.attendance_service
    att.toggle(b.user_id, DAY, MealType.BREAKFAST, DEFAULT_ADMIN_ID, now=fixed_now)
    att.toggle(a.user_id, DAY, MealType.BREAKFAST, DEFAULT_ADMIN_ID, now=fixed_now)
    att.toggle(a.user_id, DAY, MealType.DINNER, DEFAULT_ADMIN_ID, now=fixed_now)

    assert att.attendees(DEFAULT_TENANT_ID, DAY, MealScope.BOTH) == [b.user_id, a.user_id]
    assert att.attendees(DEFAULT_TENANT_ID, DAY, MealScope.DINNER) == [a.user_id]


def test_concurrent_toggles_do_not_interleave(container, fixed_now):
    student = _student(container)
    att = container.attendance_service
    start = threading.Barrier(8)

    def worker(times):
        start.wait()
        for _ in range(times):
            att.toggle(student.user_id, DAY, MealType.DINNER, DEFAULT_ADMIN_ID, now=fixed_now)

    # 51 toggles in total: the final state is marked.
    threads = [threading.Thread(target=worker, args=(7 if i else 2,)) for i in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(att.list_for_date(DEFAULT_TENANT_ID, DAY, MealType.DINNER)) == 1
    entries = container.ledger_service.list_for_user(student.user_id)
    assert len(entries) == 1
    assert container.ledger_service.balance_for(student.user_id) == 80


def test_user_history_is_newest_first(container):
    student = _student(container)
    att = container.attendance_service
    att.toggle(student.user_id, date(2025, 3, 18), MealType.DINNER, DEFAULT_ADMIN_ID, now=datetime(2025, 3, 18, 20))
    att.toggle(student.user_id, date(2025, 3, 20), MealType.BREAKFAST, DEFAULT_ADMIN_ID, now=datetime(2025, 3, 20, 8))
    att.toggle(student.user_id, date(2025, 3, 19), MealType.DINNER, DEFAULT_ADMIN_ID, now=datetime(2025, 3, 19, 20))

    marks = att.list_for_user(DEFAULT_TENANT_ID, student.user_id)

    assert [m.date for m in marks] == [date(2025, 3, 20), date(2025, 3, 19), date(2025, 3, 18)]
    assert att.list_for_user("tenant-other", student.user_id) == []
