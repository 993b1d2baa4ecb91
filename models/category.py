# Expense categories and their large-expense thresholds (₹).
# The one table shared by the API, the UI and the alert evaluator.

from decimal import Decimal
from typing import Literal

CATEGORY_THRESHOLDS: dict[str, Decimal] = {
    "Food": Decimal("300"),
    "Transport": Decimal("200"),
    "Entertainment": Decimal("400"),
    "Education": Decimal("1000"),
    "Shopping": Decimal("500"),
    "Bills": Decimal("800"),
    "Healthcare": Decimal("600"),
    "Other": Decimal("500"),
}

DEFAULT_THRESHOLD = Decimal("500")

Category = Literal[
    "Food",
    "Transport",
    "Entertainment",
    "Education",
    "Shopping",
    "Bills",
    "Healthcare",
    "Other",
]

CATEGORIES: tuple[str, ...] = tuple(CATEGORY_THRESHOLDS)


def threshold_for(category: str) -> Decimal:
    return CATEGORY_THRESHOLDS.get(category, DEFAULT_THRESHOLD)
