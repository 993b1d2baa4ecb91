import datetime
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from api.deps import get_current_user, get_store, store_error_to_http
from core.errors import StoreError
from models.alerts import Alert
from models.notification import NotificationSettings
from services import notification_service
from services.record_store import RecordStore

router = APIRouter()


class AlertCheckResult(BaseModel):
    alerts: List[Alert]
    notified: List[str]


@router.get("/settings", response_model=NotificationSettings)
def get_settings(
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    try:
        return notification_service.load_settings(store, current_user["uid"])
    except StoreError as e:
        raise store_error_to_http(e, "Reading notification settings")


@router.put("/settings", response_model=NotificationSettings)
def update_settings(
    new_settings: NotificationSettings,
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    """
    Replaces the user's notification toggles and monthly budget limit.
    """
    try:
        return notification_service.save_settings(store, current_user["uid"], new_settings)
    except StoreError as e:
        raise store_error_to_http(e, "Saving notification settings")


@router.post("/check", response_model=AlertCheckResult)
async def check_budget_alerts(
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    """
    Re-evaluates this month's spending and emails any alerts the settings allow.
    """
    try:
        alerts, notified = await notification_service.check_month(store, current_user, datetime.date.today())
    except StoreError as e:
        raise store_error_to_http(e, "Checking budget alerts")
    return AlertCheckResult(alerts=alerts, notified=notified)
