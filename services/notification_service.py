# Notification settings, alert log and alert delivery for one user
import datetime
import logging
from typing import Iterable

from core.money import to_storage
from models.notification import AlertLog, NotificationSettings
from services import email_service
from services.aggregation import month_window
from services.alert_service import evaluate_month, select_alerts_to_notify
from services.record_store import ALERT_LOG, EXPENSES, NOTIFICATION_SETTINGS, RecordStore

logger = logging.getLogger(__name__)


def load_settings(store: RecordStore, user_id: str) -> NotificationSettings:
    data = store.get_user_document(NOTIFICATION_SETTINGS, user_id)
    if not data:
        return NotificationSettings()
    return NotificationSettings(**data)


def save_settings(store: RecordStore, user_id: str, notification_settings: NotificationSettings) -> NotificationSettings:
    data = notification_settings.model_dump()
    data["monthly_budget_limit"] = to_storage(notification_settings.monthly_budget_limit)
    store.set_user_document(NOTIFICATION_SETTINGS, user_id, data)
    return notification_settings


def load_alert_log(store: RecordStore, user_id: str) -> AlertLog:
    data = store.get_user_document(ALERT_LOG, user_id)
    if not data:
        return AlertLog()
    return AlertLog(last_alerted=data.get("last_alerted") or {})


def mark_alerted(store: RecordStore, user_id: str, kinds: Iterable[str], now: datetime.datetime) -> None:
    alert_log = load_alert_log(store, user_id)
    for kind in kinds:
        alert_log.last_alerted[kind] = now
    store.set_user_document(ALERT_LOG, user_id, {
        "last_alerted": {k: v.isoformat() for k, v in alert_log.last_alerted.items()},
    })


def resolve_recipient(notification_settings: NotificationSettings, current_user: dict) -> str | None:
    return notification_settings.email or current_user.get("email")


async def notify(
    store: RecordStore,
    user_id: str,
    recipient: str | None,
    alerts: list,
    notification_settings: NotificationSettings,
    now: datetime.datetime | None = None,
) -> tuple[list[str], list[str]]:
    """
    Sends the alerts the user's settings allow. Returns (delivered, failed) kinds.
    A failed email is logged and skipped; store errors still propagate.
    """
    now = now or datetime.datetime.now(datetime.timezone.utc)
    alert_log = load_alert_log(store, user_id)
    selected = select_alerts_to_notify(alerts, notification_settings, alert_log, now)

    delivered, failed = [], []
    for alert in selected:
        if await email_service.send_alert(recipient, alert):
            delivered.append(alert.kind)
        else:
            logger.warning(f"{alert.kind} alert for user {user_id} was not delivered")
            failed.append(alert.kind)

    if delivered:
        mark_alerted(store, user_id, set(delivered), now)
    return delivered, failed


async def check_month(store: RecordStore, current_user: dict, today: datetime.date) -> tuple[list, list[str]]:
    """Manual "check budget alerts": evaluates the whole current month and notifies."""
    user_id = current_user["uid"]
    notification_settings = load_settings(store, user_id)
    start, end = month_window(today)
    month_expenses = store.select_all(EXPENSES, user_id, date_from=start, date_to=end)
    alerts = evaluate_month(month_expenses, notification_settings.monthly_budget_limit)
    recipient = resolve_recipient(notification_settings, current_user)
    delivered, _ = await notify(store, user_id, recipient, alerts, notification_settings)
    return alerts, delivered
