# Pydantic models for expense records

import datetime

from pydantic import BaseModel, computed_field, field_validator

from core.errors import ValidationError
from core.money import Money, to_money
from models.alerts import Alert
from models.category import Category, threshold_for


class ExpenseCreate(BaseModel):
    amount: Money
    category: Category
    description: str | None = None
    date: datetime.date | None = None  # defaults to today on insert

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value):
        amount = to_money(value)
        if amount <= 0:
            raise ValidationError("Amount must be greater than zero")
        return amount


class ExpenseInDB(BaseModel):
    id: str
    user_id: str
    amount: Money
    category: str
    description: str | None = None
    date: datetime.date

    @computed_field
    @property
    def over_limit(self) -> bool:
        return self.amount > threshold_for(self.category)


class ExpenseCreated(BaseModel):
    """Response of POST /expenses: the stored row plus whatever alerts it raised."""
    expense: ExpenseInDB
    alerts: list[Alert] = []
    notified: list[str] = []
    notice: str | None = None
