# Expense alerts in two stages:
#   1. evaluation - pure, always computed for every new expense
#   2. decision   - which evaluated alerts actually get emailed, per user settings
import datetime
from decimal import Decimal
from typing import Iterable, Protocol

from core.config import settings
from core.money import parse_amount
from models.alerts import BudgetExceededAlert, LargeExpenseAlert
from models.category import threshold_for
from models.notification import AlertLog, NotificationSettings
from services.aggregation import amount_of, date_of, field, group_sum_by, rank_categories, total_of

TOP_CATEGORIES = 3

# alert kind -> NotificationSettings toggle
ALERT_TOGGLES = {
    "large_expense": "large_expense_alerts",
    "budget_exceeded": "budget_alerts",
}


# --- 1. Evaluation ---

def evaluate_large_expense(expense) -> LargeExpenseAlert | None:
    amount = amount_of(expense)
    category = field(expense, "category")
    threshold = threshold_for(category)
    if amount <= threshold:
        return None
    return LargeExpenseAlert(
        amount=amount,
        category=category,
        description=field(expense, "description"),
        date=date_of(expense),
        threshold=threshold,
        overspent=amount - threshold,
    )


def evaluate_budget(month_expenses: Iterable, monthly_limit: Decimal) -> BudgetExceededAlert | None:
    month_expenses = list(month_expenses)
    limit = parse_amount(monthly_limit)
    total_monthly = total_of(month_expenses)
    if total_monthly <= limit:
        return None
    return BudgetExceededAlert(
        total_monthly=total_monthly,
        limit=limit,
        overspent_amount=total_monthly - limit,
        top_categories=rank_categories(group_sum_by(month_expenses, "category"), TOP_CATEGORIES),
    )


def evaluate_expense_alerts(expense, month_expenses: Iterable, monthly_limit: Decimal | None = None) -> list:
    """
    Alerts raised by one newly inserted expense. `month_expenses` is the
    current month's expense set, re-read after the insert, so it already
    contains `expense`. The two checks are independent and may both fire.
    """
    if monthly_limit is None:
        monthly_limit = settings.DEFAULT_MONTHLY_BUDGET_LIMIT
    alerts = []
    large = evaluate_large_expense(expense)
    if large is not None:
        alerts.append(large)
    budget = evaluate_budget(month_expenses, monthly_limit)
    if budget is not None:
        alerts.append(budget)
    return alerts


def evaluate_month(month_expenses: Iterable, monthly_limit: Decimal) -> list:
    """Manual check over a whole month: budget first, then every large expense."""
    month_expenses = list(month_expenses)
    alerts = []
    budget = evaluate_budget(month_expenses, monthly_limit)
    if budget is not None:
        alerts.append(budget)
    for expense in month_expenses:
        large = evaluate_large_expense(expense)
        if large is not None:
            alerts.append(large)
    return alerts


# --- 2. Decision ---

class SuppressionPolicy(Protocol):
    def should_suppress(self, alert, last_alerted: datetime.datetime | None, now: datetime.datetime) -> bool:
        ...


class NoSuppression:
    """Every qualifying alert is sent, including repeated budget alerts in one month."""

    def should_suppress(self, alert, last_alerted, now) -> bool:
        return False


class OncePerMonthSuppression:
    """At most one budget alert per calendar month. Large-expense alerts always go out."""

    def should_suppress(self, alert, last_alerted, now) -> bool:
        if alert.kind != "budget_exceeded" or last_alerted is None:
            return False
        return (last_alerted.year, last_alerted.month) == (now.year, now.month)


def get_suppression_policy(name: str | None = None) -> SuppressionPolicy:
    name = name or settings.ALERT_SUPPRESSION
    if name == "monthly":
        return OncePerMonthSuppression()
    return NoSuppression()


def select_alerts_to_notify(
    alerts: Iterable,
    notification_settings: NotificationSettings,
    alert_log: AlertLog | None = None,
    now: datetime.datetime | None = None,
    policy: SuppressionPolicy | None = None,
) -> list:
    if not notification_settings.email_notifications:
        return []
    policy = policy or get_suppression_policy()
    alert_log = alert_log or AlertLog()
    now = now or datetime.datetime.now(datetime.timezone.utc)

    selected = []
    for alert in alerts:
        if not getattr(notification_settings, ALERT_TOGGLES[alert.kind]):
            continue
        if policy.should_suppress(alert, alert_log.last_alerted.get(alert.kind), now):
            continue
        selected.append(alert)
    return selected
