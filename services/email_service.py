# Notification dispatcher: renders email templates and hands them to the relay.
# Delivery is best effort, every public send_* returns a bool and never raises.
import logging

import httpx

from core.config import settings
from core.errors import DispatchError
from core.templates import env as templates_env, money
from models.alerts import BudgetExceededAlert, LargeExpenseAlert
from models.report import WeeklyReport
from services.aggregation import percentage_share

logger = logging.getLogger(__name__)

WEEKLY_REPORT_SUBJECT = "📊 Your Weekly Financial Report - EduWallet"
BUDGET_ALERT_SUBJECT = "🚨 Budget Limit Exceeded - EduWallet"


async def _post_to_relay(to: str, subject: str, html: str) -> dict:
    async with httpx.AsyncClient(timeout=settings.EMAIL_TIMEOUT_SECONDS) as client:
        response = await client.post(
            settings.EMAIL_RELAY_URL,
            json={"to": to, "subject": subject, "html": html},
        )
    try:
        data = response.json()
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}
    if response.is_success and data.get("success"):
        return data
    raise DispatchError(data.get("error") or f"Relay responded with HTTP {response.status_code}")


async def send_email(to: str | None, subject: str, html: str) -> bool:
    if not to:
        logger.warning(f"No recipient for '{subject}', email skipped")
        return False
    try:
        await _post_to_relay(to, subject, html)
    except (DispatchError, httpx.HTTPError) as e:
        logger.warning(f"Email '{subject}' to {to} failed: {e}")
        return False
    logger.info(f"Email '{subject}' sent to {to}")
    return True


# --- Rendering ---

def render_weekly_report(report: WeeklyReport) -> str:
    categories = [
        {
            "category": row.category,
            "amount": row.amount,
            "share": percentage_share(row.amount, report.total_expenses),
        }
        for row in report.category_ranking
    ]
    template = templates_env.get_template("weekly_report.html")
    return template.render(report=report, categories=categories)


def render_budget_alert(alert: BudgetExceededAlert) -> str:
    template = templates_env.get_template("budget_alert.html")
    return template.render(
        alert=alert,
        overspent_share=percentage_share(alert.overspent_amount, alert.limit),
    )


def render_large_expense_alert(alert: LargeExpenseAlert) -> str:
    template = templates_env.get_template("large_expense_alert.html")
    return template.render(alert=alert)


def large_expense_subject(alert: LargeExpenseAlert) -> str:
    return f"⚠️ Large {alert.category} Expense - ₹{money(alert.amount)}"


# --- Sending ---

async def send_weekly_report(to: str | None, report: WeeklyReport) -> bool:
    return await send_email(to, WEEKLY_REPORT_SUBJECT, render_weekly_report(report))


async def send_budget_alert(to: str | None, alert: BudgetExceededAlert) -> bool:
    return await send_email(to, BUDGET_ALERT_SUBJECT, render_budget_alert(alert))


async def send_large_expense_alert(to: str | None, alert: LargeExpenseAlert) -> bool:
    return await send_email(to, large_expense_subject(alert), render_large_expense_alert(alert))


async def send_alert(to: str | None, alert) -> bool:
    if alert.kind == "budget_exceeded":
        return await send_budget_alert(to, alert)
    return await send_large_expense_alert(to, alert)
