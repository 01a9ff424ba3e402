from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles; the role decides billing eligibility and editable fields."""

    STUDENT = "student"
    ADMIN = "admin"
    COOK = "cook"


class MealType(str, Enum):
    BREAKFAST = "Breakfast"
    DINNER = "Dinner"


class MealScope(str, Enum):
    """Which attendance a misc charge is split across."""

    BREAKFAST = "Breakfast"
    DINNER = "Dinner"
    BOTH = "Both"

    def meals(self) -> tuple[MealType, ...]:
        if self is MealScope.BOTH:
            return (MealType.BREAKFAST, MealType.DINNER)
        return (MealType(self.value),)


class BillItemType(str, Enum):
    MEAL = "meal"
    MISC = "misc"
    ARREARS = "arrears"
    SECURITY = "security"
    PAYMENT = "payment"


class CashTransactionType(str, Enum):
    GIVEN = "given"
    RETURNED = "returned"
    ADJUSTMENT = "adjustment"


class HistoryType(str, Enum):
    """Audit log categories."""

    USER_MANAGEMENT = "User Management"
    MENU_MANAGEMENT = "Menu Management"
    ATTENDANCE_MANAGEMENT = "Attendance Management"
    FINANCIAL_ADMIN = "Financial Admin"
    SYSTEM = "System"
    TENANT_MANAGEMENT = "Tenant Management"


class RequestStatus(str, Enum):
    """Registration request lifecycle: pending -> approved | rejected."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
