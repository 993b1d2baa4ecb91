# Pydantic models for savings goals

import datetime
from decimal import Decimal

from pydantic import BaseModel, field_validator

from core.errors import ValidationError
from core.money import Money, to_money


def _non_negative(value):
    amount = to_money(value)
    if amount < 0:
        raise ValidationError("Amount cannot be negative")
    return amount


class GoalCreate(BaseModel):
    title: str
    target_amount: Money
    current_amount: Money = Decimal("0.00")
    target_date: datetime.date

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValidationError("Title is required")
        return value

    @field_validator("target_amount", mode="before")
    @classmethod
    def _parse_target(cls, value):
        amount = to_money(value)
        if amount <= 0:
            raise ValidationError("Target amount must be greater than zero")
        return amount

    @field_validator("current_amount", mode="before")
    @classmethod
    def _parse_current(cls, value):
        if value is None or value == "":
            return to_money(0)
        return _non_negative(value)


class GoalProgressUpdate(BaseModel):
    current_amount: Money

    @field_validator("current_amount", mode="before")
    @classmethod
    def _parse_current(cls, value):
        return _non_negative(value)


class GoalInDB(BaseModel):
    id: str
    user_id: str
    title: str
    target_amount: Money
    current_amount: Money
    target_date: datetime.date
    created_at: datetime.datetime | None = None


class GoalView(GoalInDB):
    progress: float
    days_remaining: int
