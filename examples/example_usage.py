"""Example: drive the service layer directly (no Flask).

Controllers are thin; every rule lives in the services wired by the container.
"""

from datetime import date, datetime

from src.mess_system.mess_system.container import build_container
from src.mess_system.mess_system.core.enums import MealScope, MealType, Role
from src.mess_system.mess_system.storage.bootstrap import DEFAULT_ADMIN_ID, DEFAULT_TENANT_ID


def main():
    container = build_container(store_path=None)
    student = container.user_service.add(
        role=Role.STUDENT, name="demo-student", password="1234", actor_id=DEFAULT_ADMIN_ID, tenant_id=DEFAULT_TENANT_ID
    )

    day = date.today()
    container.attendance_service.toggle(student.user_id, day, MealType.BREAKFAST, DEFAULT_ADMIN_ID)
    container.attendance_service.toggle(student.user_id, day, MealType.DINNER, DEFAULT_ADMIN_ID)
    container.ledger_service.add_misc_charge("Sweets", "100", day, MealScope.BOTH, DEFAULT_ADMIN_ID, DEFAULT_TENANT_ID)
    container.ledger_service.add_payment(student.user_id, "150", DEFAULT_ADMIN_ID)

    for row in container.ledger_service.running_history(student.user_id):
        print(f"{row.entry.description:<40} {row.entry.amount:>8} {row.balance_after:>8}")
    print("Balance:", container.ledger_service.balance_for(student.user_id))
    print("Bill cycle:", container.ledger_service.current_bill(student.user_id, datetime.now().date()).total)


if __name__ == "__main__":
    main()
