"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from decimal import Decimal

from .enums import MealType

MEAL_COST = {
    MealType.BREAKFAST: Decimal("50"),
    MealType.DINNER: Decimal("80"),
}

# Hours are [start, end) in local wall-clock time.
DEFAULT_MEAL_TIMES = {
    MealType.BREAKFAST: {"start": 7, "end": 10},
    MealType.DINNER: {"start": 19, "end": 22},
}

SYSTEM_ACTOR = "system"
SYSTEM_TENANT = "system"

BILL_CYCLE_CUTOVER_DAY = 15
DEFAULT_SESSION_DAYS = 7
MIN_PASSWORD_LENGTH = 4

CURRENCY_LABEL = "Rs."
