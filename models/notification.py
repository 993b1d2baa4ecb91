# Per-user notification settings, persisted in the 'notification_settings' collection

import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator

from core.config import settings
from core.errors import ValidationError
from core.money import Money, to_money


class NotificationSettings(BaseModel):
    email: EmailStr | None = None
    email_notifications: bool = True
    weekly_report: bool = True
    budget_alerts: bool = True
    large_expense_alerts: bool = True
    monthly_budget_limit: Money = Field(default_factory=lambda: to_money(settings.DEFAULT_MONTHLY_BUDGET_LIMIT))

    @field_validator("monthly_budget_limit", mode="before")
    @classmethod
    def _parse_limit(cls, value):
        amount = to_money(value)
        if amount <= 0:
            raise ValidationError("Monthly budget limit must be greater than zero")
        return amount


class AlertLog(BaseModel):
    """Last successful delivery per alert kind."""
    last_alerted: dict[str, datetime.datetime] = {}


class SendResult(BaseModel):
    sent: bool
    detail: str | None = None
