import datetime

from fastapi import APIRouter, Depends

from api.deps import get_current_user, get_store, store_error_to_http
from core.errors import StoreError
from models.notification import SendResult
from models.report import WeeklyReport
from services import email_service, notification_service
from services.record_store import RecordStore
from services.report_service import build_weekly_report

router = APIRouter()


@router.get("/weekly", response_model=WeeklyReport)
def get_weekly_report(
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    """
    Preview of the weekly report for the last 7 days.
    """
    try:
        return build_weekly_report(store, current_user["uid"], datetime.date.today())
    except StoreError as e:
        raise store_error_to_http(e, "Building weekly report")


@router.post("/weekly/send", response_model=SendResult)
async def send_weekly_report(
    current_user: dict = Depends(get_current_user),
    store: RecordStore = Depends(get_store),
):
    """
    Composes the weekly report and emails it to the user right away.
    """
    user_id = current_user["uid"]
    try:
        report = build_weekly_report(store, user_id, datetime.date.today())
        user_settings = notification_service.load_settings(store, user_id)
    except StoreError as e:
        raise store_error_to_http(e, "Building weekly report")

    recipient = notification_service.resolve_recipient(user_settings, current_user)
    if not recipient:
        return SendResult(sent=False, detail="No email address on file")

    sent = await email_service.send_weekly_report(recipient, report)
    if sent:
        return SendResult(sent=True, detail=f"Weekly report sent to {recipient}")
    return SendResult(sent=False, detail="Failed to send email, the email relay did not accept it")
