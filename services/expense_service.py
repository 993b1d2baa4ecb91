import datetime
import logging

from core.money import to_storage
from models.expense import ExpenseCreate, ExpenseCreated, ExpenseInDB
from services import notification_service
from services.aggregation import month_window
from services.alert_service import evaluate_expense_alerts
from services.record_store import EXPENSES, RecordStore

logger = logging.getLogger(__name__)


def list_expenses(store: RecordStore, user_id: str) -> list[ExpenseInDB]:
    return [ExpenseInDB(**row) for row in store.select_all(EXPENSES, user_id)]


def insert_expense(store: RecordStore, user_id: str, data: ExpenseCreate, today: datetime.date) -> ExpenseInDB:
    record = {
        "user_id": user_id,
        "amount": to_storage(data.amount),
        "category": data.category,
        "description": data.description,
        "date": (data.date or today).isoformat(),
    }
    expense_id = store.insert(EXPENSES, record)
    return ExpenseInDB(id=expense_id, **record)


async def record_expense(
    store: RecordStore,
    current_user: dict,
    data: ExpenseCreate,
    today: datetime.date | None = None,
) -> ExpenseCreated:
    """
    Inserts the expense, then evaluates and dispatches alerts.
    Only the insert may fail the call: once it has committed, anything that
    goes wrong in the alert stage is logged and reported as a soft notice.
    """
    today = today or datetime.date.today()
    user_id = current_user["uid"]
    expense = insert_expense(store, user_id, data, today)

    try:
        notification_settings = notification_service.load_settings(store, user_id)
        start, end = month_window(today)
        # Separate read after the insert, not atomic with it
        month_expenses = store.select_all(EXPENSES, user_id, date_from=start, date_to=end)
        alerts = evaluate_expense_alerts(expense, month_expenses, notification_settings.monthly_budget_limit)
    except Exception:
        logger.exception(f"Alert evaluation failed for expense {expense.id}")
        return ExpenseCreated(expense=expense, notice="Expense saved, but spending alerts could not be checked.")

    if not alerts:
        return ExpenseCreated(expense=expense)

    try:
        recipient = notification_service.resolve_recipient(notification_settings, current_user)
        notified, failed = await notification_service.notify(store, user_id, recipient, alerts, notification_settings)
    except Exception:
        logger.exception(f"Alert dispatch failed for expense {expense.id}")
        notified, failed = [], [a.kind for a in alerts]

    notice = "Expense saved. Some alert emails were not sent." if failed else None
    return ExpenseCreated(expense=expense, alerts=alerts, notified=notified, notice=notice)


def delete_expense(store: RecordStore, user_id: str, expense_id: str) -> None:
    store.delete(EXPENSES, expense_id, user_id)
