# Alert events produced by the expense alert evaluator

import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from core.money import Money


class CategorySpend(BaseModel):
    category: str
    amount: Money


class LargeExpenseAlert(BaseModel):
    kind: Literal["large_expense"] = "large_expense"
    amount: Money
    category: str
    description: str | None = None
    date: datetime.date
    threshold: Money
    overspent: Money


class BudgetExceededAlert(BaseModel):
    kind: Literal["budget_exceeded"] = "budget_exceeded"
    total_monthly: Money
    limit: Money
    overspent_amount: Money
    top_categories: list[CategorySpend]


Alert = Annotated[Union[LargeExpenseAlert, BudgetExceededAlert], Field(discriminator="kind")]
