import datetime
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler

from core.config import settings
from core.errors import StoreError
from models.notification import NotificationSettings
from services import email_service
from services.record_store import NOTIFICATION_SETTINGS, WEEKLY_REPORTS, RecordStore
from services.report_service import build_weekly_report

logger = logging.getLogger(__name__)

scheduler: AsyncIOScheduler | None = None


def _already_sent(store: RecordStore, user_id: str, today: datetime.date) -> bool:
    rows = store.select_all(WEEKLY_REPORTS, user_id, date_from=today, date_to=today)
    return any(row.get("sent") for row in rows)


async def send_weekly_reports(store: RecordStore | None = None, today: datetime.date | None = None) -> int:
    """Weekly job: emails the report to every opted-in user. Returns how many were sent."""
    store = store or RecordStore()
    today = today or datetime.date.today()
    sent_count = 0

    for doc in store.list_documents(NOTIFICATION_SETTINGS):
        user_id = doc.get("user_id") or doc["id"]
        try:
            user_settings = NotificationSettings(**doc)
            if not (user_settings.email_notifications and user_settings.weekly_report and user_settings.email):
                continue
            if _already_sent(store, user_id, today):
                continue
            report = build_weekly_report(store, user_id, today)
            sent = await email_service.send_weekly_report(user_settings.email, report)
            store.insert(WEEKLY_REPORTS, {
                "user_id": user_id,
                "date": today,
                "sent_at": datetime.datetime.now(datetime.timezone.utc),
                "sent": sent,
            })
        except StoreError as e:
            logger.warning(f"Weekly report for user {user_id} skipped: {e}")
            continue
        except Exception:
            logger.exception(f"Weekly report for user {user_id} failed")
            continue
        if sent:
            sent_count += 1

    logger.info(f"Weekly reports sent: {sent_count}")
    return sent_count


def start_scheduler():
    global scheduler
    if scheduler is not None or not settings.WEEKLY_REPORT_ENABLED:
        return

    scheduler = AsyncIOScheduler(timezone=settings.SCHEDULER_TIMEZONE)
    scheduler.add_job(send_weekly_reports, "cron", day_of_week="mon", hour=9, minute=0, id="weekly_report")
    scheduler.start()
