# Pydantic models for income records

import datetime

from pydantic import BaseModel, field_validator

from core.errors import ValidationError
from core.money import Money, to_money


class IncomeCreate(BaseModel):
    amount: Money
    source: str
    description: str | None = None
    date: datetime.date | None = None  # defaults to today on insert

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value):
        amount = to_money(value)
        if amount <= 0:
            raise ValidationError("Amount must be greater than zero")
        return amount

    @field_validator("source")
    @classmethod
    def _source_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValidationError("Source is required")
        return value


class IncomeInDB(BaseModel):
    id: str
    user_id: str
    amount: Money
    source: str
    description: str | None = None
    date: datetime.date
